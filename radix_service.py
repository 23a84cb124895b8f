"""
Radix Trie Service — a REST API over a compact prefix tree.

Exposes the radix trie as a JSON API with endpoints for inserting words,
exact and partial lookup, prefix completion, deletion, and plain-text
renderings of the stored set.  Built with Flask using an application
factory: every app owns exactly one trie.
"""

from __future__ import annotations

import os
import time
import logging
import threading

from flask import Flask, Response, current_app, jsonify, request

from radix_trie import RENDER_STYLES, InvalidArgument, RadixTrie

logger = logging.getLogger("radix-trie-service")

# Sample words seeded into a fresh service when TRIE_SEED is enabled.
SEED_WORDS = [
    "helloworld", "cartoon", "band", "application", "-", "abs",
    "interest", "hello", "worldview", "cat", "interested", "absolutismus",
    "apple", "world", "interesting", "banana", "super", "car",
    "absolution", "moon", "absolutely", "app", "appreciation", "Berlin",
    "casio", "applied", "Bratislava", "bat", "intervention", "superman",
    "supercalifragilisticexpialidocious", "applying", " ", "caterpillar",
    "superb",
]

DEFAULT_LIMIT = 25


def _env_config() -> dict:
    return {
        "TRIE_SEED": os.environ.get("TRIE_SEED", "1") != "0",
        "TRIE_MAX_WORD_LENGTH": int(os.environ.get("TRIE_MAX_WORD_LENGTH", 256)),
    }


def create_app(trie: RadixTrie | None = None, **overrides) -> Flask:
    """Build a Flask app serving *trie* (a new one when omitted)."""
    app = Flask(__name__)
    app.config.update(_env_config())
    app.config.update(overrides)

    if trie is None:
        trie = RadixTrie()
        if app.config["TRIE_SEED"]:
            for word in SEED_WORDS:
                trie.insert(word)
            logger.info("Seeded trie with %d words", len(trie))

    app.extensions["radix_trie"] = trie
    # Mutations and reads must not interleave.
    app.extensions["radix_trie_lock"] = threading.Lock()
    app.config["STARTED_AT"] = time.time()

    _register_routes(app)
    return app


def _trie() -> RadixTrie:
    return current_app.extensions["radix_trie"]


def _lock() -> threading.Lock:
    return current_app.extensions["radix_trie_lock"]


def _uptime() -> float:
    return round(time.time() - current_app.config["STARTED_AT"], 2)


def _register_routes(app: Flask) -> None:

    @app.errorhandler(InvalidArgument)
    def invalid_argument(exc):
        return jsonify({"error": str(exc)}), 400

    # ── Health & Info ─────────────────────────────────────────────────

    @app.route("/")
    def index():
        """Landing page with API documentation."""
        return jsonify({
            "service": "Radix Trie Service",
            "version": "1.0.0",
            "description": "REST API for prefix lookup and completion over a radix trie",
            "endpoints": {
                "GET  /":                            "This help page",
                "GET  /health":                      "Health check",
                "GET  /stats":                       "Trie statistics",
                "GET  /find?q=<word>&partial=<0|1>": "Exact or partial node lookup",
                "GET  /complete?q=<prefix>":         "Suffixes completing a prefix",
                "GET  /words":                       "All stored words",
                "GET  /render?style=<style>":        f"Plain-text rendering ({', '.join(RENDER_STYLES)})",
                "POST /insert":                      "Insert a word  {\"word\": \"...\"}",
                "DELETE /remove?q=<word>":           "Remove a word",
            },
        })

    @app.route("/health")
    def health():
        """Liveness / readiness probe."""
        with _lock():
            size = len(_trie())
        return jsonify({
            "status": "healthy",
            "uptime_seconds": _uptime(),
            "trie_size": size,
        })

    @app.route("/stats")
    def stats():
        """Trie statistics."""
        with _lock():
            trie = _trie()
            return jsonify({
                "total_words": len(trie),
                "total_nodes": trie.node_count(),
                "uptime_seconds": _uptime(),
                "seed_words": len(SEED_WORDS) if current_app.config["TRIE_SEED"] else 0,
            })

    # ── Core API ──────────────────────────────────────────────────────

    @app.route("/find")
    def find():
        """Exact or partial lookup of the node a query lands on."""
        q = request.args.get("q")
        if q is None:
            return jsonify({"error": "Missing query parameter 'q'"}), 400
        partial = request.args.get("partial", "0") == "1"
        with _lock():
            node = _trie().find(q, allow_partial=partial)
        if node is None:
            return jsonify({"query": q, "found": False, "is_terminal": False,
                            "label": None, "partial": False})
        return jsonify({
            "query": q,
            "found": True,
            "is_terminal": node.is_terminal,
            "label": node.label,
            "partial": node.partial,
        })

    @app.route("/complete")
    def complete():
        """Return the suffixes completing a prefix (autocomplete)."""
        q = request.args.get("q", "")
        limit = request.args.get("limit", str(DEFAULT_LIMIT), type=str)
        try:
            limit = int(limit)
        except ValueError:
            limit = DEFAULT_LIMIT

        with _lock():
            completions = _trie().complete(q)[:max(limit, 0)]

        return jsonify({
            "prefix": q,
            "count": len(completions),
            "completions": completions,
        })

    @app.route("/words")
    def words():
        """Every stored word, in traversal order."""
        with _lock():
            stored = _trie().list()
        return jsonify({"count": len(stored), "words": stored})

    @app.route("/render")
    def render():
        """Plain-text rendering of the trie."""
        style = request.args.get("style", "tree")
        with _lock():
            text = _trie().render(style)
        return Response(text + "\n", mimetype="text/plain")

    @app.route("/insert", methods=["POST"])
    def insert():
        """Insert a word into the trie."""
        body = request.get_json(silent=True) or {}
        word = body.get("word")

        if not isinstance(word, str):
            return jsonify({"error": "Missing string 'word' in request body"}), 400
        max_length = current_app.config["TRIE_MAX_WORD_LENGTH"]
        if len(word) > max_length:
            return jsonify({"error": f"Word too long (max {max_length} chars)"}), 400

        with _lock():
            trie = _trie()
            trie.insert(word)
            size = len(trie)
        logger.info("Inserted word=%r", word)
        return jsonify({"inserted": word, "size": size}), 201

    @app.route("/remove", methods=["DELETE"])
    def remove():
        """Remove a word from the trie."""
        q = request.args.get("q")
        if q is None:
            return jsonify({"error": "Missing query parameter 'q'"}), 400

        with _lock():
            trie = _trie()
            removed = trie.remove(q)
            size = len(trie)
        if removed:
            logger.info("Removed word=%r", q)
        status = 200 if removed else 404
        return jsonify({"word": q, "removed": removed, "size": size}), status


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    app = create_app()
    port = int(os.environ.get("PORT", 8080))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting Radix Trie Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()

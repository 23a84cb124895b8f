import threading

import pytest

from radix_service import SEED_WORDS, create_app
from radix_trie import RadixTrie


@pytest.fixture
def client():
    app = create_app(RadixTrie(["car", "cart", "carton", "carve", "carbon"]))
    app.config["TESTING"] = True
    return app.test_client()


def test_seeded_app():
    app = create_app(TRIE_SEED=True)
    resp = app.test_client().get("/stats")

    assert resp.status_code == 200
    assert resp.get_json()["total_words"] == len(set(SEED_WORDS))


def test_unseeded_app_is_empty():
    app = create_app(TRIE_SEED=False)
    resp = app.test_client().get("/health")

    assert resp.get_json()["trie_size"] == 0
    assert resp.get_json()["status"] == "healthy"


def test_apps_do_not_share_tries():
    first = create_app(TRIE_SEED=False).test_client()
    second = create_app(TRIE_SEED=False).test_client()

    first.post("/insert", json={"word": "only-here"})
    assert second.get("/words").get_json()["words"] == []


def test_index(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "endpoints" in resp.get_json()


def test_find(client):
    data = client.get("/find?q=car").get_json()
    assert data["found"] is True
    assert data["is_terminal"] is True

    data = client.get("/find?q=ca").get_json()
    assert data["found"] is False

    data = client.get("/find?q=ca&partial=1").get_json()
    assert data["found"] is True
    assert data["is_terminal"] is False
    assert data["partial"] is True
    assert data["label"] == "car"

    assert client.get("/find").status_code == 400


def test_complete(client):
    data = client.get("/complete?q=car").get_json()
    assert sorted(data["completions"]) == ["bon", "t", "ton", "ve"]
    assert data["count"] == 4

    data = client.get("/complete?q=car&limit=2").get_json()
    assert data["count"] == 2

    data = client.get("/complete?q=car&limit=abc").get_json()
    assert data["count"] == 4

    data = client.get("/complete?q=zzz").get_json()
    assert data["completions"] == []


def test_insert_and_remove(client):
    resp = client.post("/insert", json={"word": "cat"})
    assert resp.status_code == 201
    assert resp.get_json()["size"] == 6

    resp = client.delete("/remove?q=cat")
    assert resp.status_code == 200
    assert resp.get_json()["removed"] is True

    resp = client.delete("/remove?q=cat")
    assert resp.status_code == 404
    assert resp.get_json()["removed"] is False

    assert client.delete("/remove").status_code == 400


def test_insert_validation(client):
    assert client.post("/insert", json={}).status_code == 400
    assert client.post("/insert", json={"word": 7}).status_code == 400
    assert client.post("/insert", data="not json").status_code == 400

    resp = client.post("/insert", json={"word": "x" * 257})
    assert resp.status_code == 400
    assert "too long" in resp.get_json()["error"]


def test_words(client):
    data = client.get("/words").get_json()
    assert data["words"] == ["car", "carbon", "cart", "carton", "carve"]


def test_render(client):
    resp = client.get("/render?style=tree")
    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True).splitlines()[1] == "## car *"

    resp = client.get("/render?style=words")
    assert resp.get_data(as_text=True) == "car\ncarbon\ncart\ncarton\ncarve\n"


def test_render_unknown_style(client):
    resp = client.get("/render?style=yaml")
    assert resp.status_code == 400
    assert "'yaml'" in resp.get_json()["error"]


def test_find_partial_is_not_a_word():
    client = create_app(RadixTrie(["carton"])).test_client()

    data = client.get("/find?q=car&partial=1").get_json()
    assert data["found"] is True
    assert data["partial"] is True
    assert data["is_terminal"] is False


def test_find_empty_query_returns_root():
    client = create_app(RadixTrie(["", "a"])).test_client()

    data = client.get("/find?q=").get_json()
    assert data["found"] is True
    assert data["is_terminal"] is True
    assert data["label"] == ""
    assert data["partial"] is False


def test_complete_without_prefix(client):
    data = client.get("/complete").get_json()
    assert data["prefix"] == ""
    assert data["completions"] == ["car", "carbon", "cart", "carton", "carve"]


def test_environment_config(monkeypatch):
    monkeypatch.setenv("TRIE_SEED", "0")
    monkeypatch.setenv("TRIE_MAX_WORD_LENGTH", "3")
    client = create_app().test_client()

    assert client.get("/stats").get_json()["total_words"] == 0
    assert client.get("/stats").get_json()["seed_words"] == 0

    resp = client.post("/insert", json={"word": "abcd"})
    assert resp.status_code == 400
    assert "max 3" in resp.get_json()["error"]

    assert client.post("/insert", json={"word": "abc"}).status_code == 201
    assert client.get("/words").get_json()["words"] == ["abc"]


def test_health_waits_for_lock():
    app = create_app(TRIE_SEED=False)
    client = app.test_client()
    lock = app.extensions["radix_trie_lock"]
    responses = []

    worker = threading.Thread(
        target=lambda: responses.append(client.get("/health")), daemon=True
    )
    lock.acquire()
    try:
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert responses == []
    finally:
        lock.release()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert responses[0].status_code == 200

"""
Radix Trie — a compact prefix tree over a set of strings.

Techniques used:
  - Edge compression: every node carries a multi-character label, so a
    chain of single-child nodes is always stored as one edge.
  - Split on insert: when a new word diverges partway through a label the
    label is cut in two and a shared-prefix node is introduced.
  - Merge on delete: a non-terminal node left with a single child absorbs
    that child, keeping the tree maximally compacted after every call.
  - Iterative traversal: no public method recurses, so the call stack
    stays constant regardless of word length or tree depth.

Complexity (n = word length, m = size of the enumerated subtree):
  insert / find / remove   — O(n)
  complete / list          — O(n + m)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

log = logging.getLogger("radix-trie")

RENDER_STYLES = ("words", "tree")

TREE_MARKER = "#"
TERMINAL_MARK = " *"


class InvalidArgument(ValueError):
    """Raised when a caller passes a selector the trie does not recognise."""


@dataclass
class _RadixNode:
    """Internal node of the radix trie.

    The edge label from the parent to this node is stored on the node
    itself.  The parent's key for this node is always ``label[0]``.
    """

    label: str = ""
    is_terminal: bool = False
    children: dict[str, _RadixNode] = field(default_factory=dict)


@dataclass(frozen=True)
class NodeView:
    """Read-only snapshot of a node returned by :meth:`RadixTrie.find`."""

    label: str
    is_terminal: bool
    # True when the query ended strictly inside ``label``.
    partial: bool = False
    child_keys: tuple[str, ...] = ()


def _check_str(value: object, name: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, not {type(value).__name__}")


def _common_length(word: str, start: int, label: str) -> int:
    """Length of the common run of ``word[start:]`` and ``label``."""
    j = 0
    while j < len(label) and start + j < len(word) and word[start + j] == label[j]:
        j += 1
    return j


class RadixTrie:
    """A compressed prefix tree holding a set of strings.

    >>> t = RadixTrie(["car", "cart", "carton", "carve", "carbon"])
    >>> t.find("car").is_terminal
    True
    >>> t.find("ca") is None
    True
    >>> t.find("ca", allow_partial=True).is_terminal
    False
    >>> sorted(t.complete("car"))
    ['bon', 't', 'ton', 've']
    >>> t.remove("cart")
    True
    >>> "cart" in t
    False
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._root = _RadixNode()
        self._size = 0
        for word in words:
            self.insert(word)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, word: str) -> None:
        """Add *word* to the set.  Inserting a stored word is a no-op."""
        _check_str(word, "word")
        node = self._root
        i = 0
        while i < len(word):
            char = word[i]
            child = node.children.get(char)
            if child is None:
                # No edge starts with this character: hang the whole
                # remaining suffix off the current node.
                node.children[char] = _RadixNode(label=word[i:], is_terminal=True)
                self._size += 1
                return
            label = child.label
            j = _common_length(word, i, label)
            if j == len(label):
                node = child
                i += j
                continue
            # Divergence or early end inside the label: split it.
            common = _RadixNode(label=label[:j])
            child.label = label[j:]
            common.children[child.label[0]] = child
            node.children[char] = common
            if i + j == len(word):
                common.is_terminal = True
                log.debug("split %r at %d, %r ends on the split", label, j, word)
            else:
                remaining = word[i + j :]
                common.children[remaining[0]] = _RadixNode(
                    label=remaining, is_terminal=True
                )
                log.debug("split %r at %d for %r", label, j, word)
            self._size += 1
            return
        # Word consumed exactly at a node boundary (the root for "").
        if not node.is_terminal:
            node.is_terminal = True
            self._size += 1

    def find(self, query: str, allow_partial: bool = False) -> NodeView | None:
        """Return a view of the node reached by *query*, or ``None``.

        The query must end on a node boundary unless *allow_partial* is
        set, in which case a query ending strictly inside a label returns
        that node with ``partial=True``.  Check ``is_terminal`` on the
        result to tell a stored word from a mere path.
        """
        _check_str(query, "query")
        found = self._locate(query)
        if found is None:
            return None
        node, offset = found
        partial = offset < len(node.label)
        if partial and not allow_partial:
            return None
        return NodeView(
            label=node.label,
            # A query ending inside a label never names a stored word.
            is_terminal=node.is_terminal and not partial,
            partial=partial,
            child_keys=tuple(sorted(node.children)),
        )

    def remove(self, word: str) -> bool:
        """Remove *word* from the set.  Returns ``True`` if it was stored."""
        _check_str(word, "word")
        path: list[tuple[_RadixNode, str]] = []
        node = self._root
        i = 0
        while i < len(word):
            char = word[i]
            child = node.children.get(char)
            if child is None or not word.startswith(child.label, i):
                return False
            path.append((node, char))
            node = child
            i += len(child.label)
        if not node.is_terminal:
            return False
        node.is_terminal = False
        self._size -= 1
        # Walk back toward the root, pruning dead leaves and merging
        # non-terminal nodes that are left with a single child.
        for parent, char in reversed(path):
            child = parent.children[char]
            if child.is_terminal:
                continue
            if not child.children:
                del parent.children[char]
                log.debug("pruned %r", child.label)
            elif len(child.children) == 1:
                (grandchild,) = child.children.values()
                log.debug("merged %r + %r", child.label, grandchild.label)
                child.label += grandchild.label
                child.is_terminal = grandchild.is_terminal
                child.children = grandchild.children
        return True

    def complete(self, prefix: str) -> list[str]:
        """Return the suffixes that extend *prefix* to a stored word.

        ``prefix + s`` is a stored word for every returned ``s``.  The
        empty suffix is never returned, even when *prefix* itself is stored.
        """
        _check_str(prefix, "prefix")
        found = self._locate(prefix)
        if found is None:
            return []
        node, offset = found
        # Mid-label: the rest of the label is the start of every completion.
        return [acc for acc in self._walk(node, node.label[offset:]) if acc]

    def list(self) -> list[str]:
        """Return every stored word, in traversal order."""
        return list(self._walk(self._root, ""))

    def words_with_prefix(self, prefix: str) -> list[str]:
        """Return every stored word that begins with *prefix*."""
        words = [prefix + suffix for suffix in self.complete(prefix)]
        if prefix in self:
            words.insert(0, prefix)
        return words

    def starts_with(self, prefix: str) -> bool:
        """Return ``True`` if any stored word begins with *prefix*."""
        _check_str(prefix, "prefix")
        found = self._locate(prefix)
        if found is None:
            return False
        # Every leaf is terminal, so only an empty root has no word below it.
        node = found[0]
        return node.is_terminal or bool(node.children)

    def node_count(self) -> int:
        """Number of nodes below the root."""
        count = 0
        stack = list(self._root.children.values())
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children.values())
        return count

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def render_tree(self) -> str:
        """Render one line per node: depth markers, label, terminal mark."""
        lines = []
        stack: list[tuple[_RadixNode, int]] = [(self._root, 0)]
        while stack:
            node, depth = stack.pop()
            line = f"{TREE_MARKER * (depth + 1)} {node.label}"
            if node.is_terminal:
                line += TERMINAL_MARK
            lines.append(line)
            for char in sorted(node.children, reverse=True):
                stack.append((node.children[char], depth + 1))
        return "\n".join(lines)

    def render(self, style: str = "tree") -> str:
        """Render the trie as ``"words"`` (one per line) or ``"tree"``."""
        if style == "words":
            return "\n".join(self.list())
        if style == "tree":
            return self.render_tree()
        raise InvalidArgument(
            f"unknown render style {style!r}, expected one of {', '.join(RENDER_STYLES)}"
        )

    def __len__(self) -> int:
        return self._size

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        node = self.find(word)
        return node is not None and node.is_terminal

    def __iter__(self) -> Iterator[str]:
        return self._walk(self._root, "")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _locate(self, key: str) -> tuple[_RadixNode, int] | None:
        """Walk the trie following *key*.

        Returns the landing node and how many characters of its label the
        key matched (``len(label)`` on a boundary), or ``None`` when the key
        leaves the tree.
        """
        node = self._root
        i = 0
        while i < len(key):
            child = node.children.get(key[i])
            if child is None:
                return None
            j = _common_length(key, i, child.label)
            if j < len(child.label):
                if i + j == len(key):
                    return child, j
                return None
            node = child
            i += j
        return node, len(node.label)

    @staticmethod
    def _walk(start: _RadixNode, base: str) -> Iterator[str]:
        """Yield ``base`` plus the labels below *start* for each terminal node."""
        # DFS with explicit stack: (node, accumulated text)
        stack: list[tuple[_RadixNode, str]] = [(start, base)]
        while stack:
            current, acc = stack.pop()
            if current.is_terminal:
                yield acc
            for char in sorted(current.children, reverse=True):
                child = current.children[char]
                stack.append((child, acc + child.label))

"""Segment trie holding the registered patterns.

Each node stands for one canonical path without its trailing slash and
has two slots: the exact pattern ending there (``/users/me``) and the
prefix pattern ending there with a slash (``/users/me/``). The root is
``/`` and only ever holds a prefix entry.

The trie performs no locking. ``Mux`` takes an exclusive lock around
``insert`` and a shared lock around ``match``.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from switchyard.errors import ConfigurationError, DuplicateRouteError
from switchyard.routing.canonical import canonicalize, split_segments
from switchyard.routing.entry import Entry


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("children", "exact", "prefix")

    def __init__(self) -> None:
        # Literal segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Entry for the pattern without trailing slash
        self.exact: Entry | None = None
        # Entry for the pattern with trailing slash
        self.prefix: Entry | None = None


@dataclass(frozen=True, slots=True)
class TrieMatch:
    """Outcome of ``RouteTrie.match``.

    Exactly one of three shapes:

    - ``entry`` set: a route won; ``prefix`` is its pattern when it won
      as a prefix match, ``None`` for an exact match.
    - ``redirect`` set: the path lacks a trailing slash that a registered
      pattern has; redirect there.
    - all ``None``: nothing matched.
    """

    entry: Entry | None = None
    prefix: str | None = None
    redirect: str | None = None

    def __bool__(self) -> bool:
        return self.entry is not None or self.redirect is not None


_NO_MATCH = TrieMatch()


class RouteTrie:
    """Mutable index of canonical patterns.

    Usage::

        trie = RouteTrie()
        trie.insert("/users/", Entry("/users/", users))
        trie.insert("/users/me", Entry("/users/me", me))
        trie.match("/users/42").entry.pattern   # "/users/"
        trie.match("/users/me").entry.pattern   # "/users/me"
    """

    __slots__ = ("_root", "_size")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, pattern: object) -> bool:
        return isinstance(pattern, str) and self.lookup(pattern) is not None

    def insert(self, pattern: str, entry: Entry) -> None:
        """Store *entry* under the canonical *pattern*.

        Raises ``DuplicateRouteError`` if the slot is taken. The occupancy
        check happens before any node is created, so a failed insert
        leaves the trie as it was.
        """
        if pattern != canonicalize(pattern):
            msg = f"pattern {pattern!r} is not canonical"
            raise ConfigurationError(msg)
        if entry.pattern != pattern:
            msg = f"entry pattern {entry.pattern!r} does not match {pattern!r}"
            raise ConfigurationError(msg)
        if self.lookup(pattern) is not None:
            raise DuplicateRouteError(pattern)

        segments, _ = split_segments(pattern)
        node = self._root
        for segment in segments:
            child = node.children.get(segment)
            if child is None:
                child = _TrieNode()
                node.children[segment] = child
            node = child

        if pattern.endswith("/"):
            node.prefix = entry
        else:
            node.exact = entry
        self._size += 1

    def lookup(self, pattern: str) -> Entry | None:
        """Return the entry registered under exactly *pattern*."""
        segments, _ = split_segments(pattern)
        node = self._walk(segments)
        if node is None:
            return None
        if pattern.endswith("/"):
            return node.prefix
        return node.exact

    def match(self, path: str) -> TrieMatch:
        """Pick the winning entry for the canonical request *path*.

        1. An exact entry equal to *path* wins.
        2. Else, if *path* has no trailing slash and ``path + "/"`` is
           registered, signal a redirect there.
        3. Else the longest prefix entry that is a prefix of *path* wins.
        """
        segments, trailing = split_segments(path)
        node = self._root
        best = node.prefix
        last = len(segments)

        for depth, segment in enumerate(segments, 1):
            child = node.children.get(segment)
            if child is None:
                return _prefix_match(best)
            node = child
            # A prefix ending here covers the path only if more follows.
            if depth < last and node.prefix is not None:
                best = node.prefix

        if not segments:
            return _prefix_match(best)
        if trailing:
            return _prefix_match(node.prefix or best)
        if node.exact is not None:
            return TrieMatch(entry=node.exact)
        if node.prefix is not None:
            return TrieMatch(redirect=path + "/")
        return _prefix_match(best)

    def entries(self) -> Iterator[Entry]:
        """Yield every entry, ordered by pattern."""
        collected: list[Entry] = []
        self._collect(self._root, collected)
        yield from sorted(collected, key=lambda e: e.pattern)

    def _collect(self, node: _TrieNode, result: list[Entry]) -> None:
        """Recursively collect entries from the trie."""
        if node.exact is not None:
            result.append(node.exact)
        if node.prefix is not None:
            result.append(node.prefix)
        for child in node.children.values():
            self._collect(child, result)

    def _walk(self, segments: tuple[str, ...]) -> _TrieNode | None:
        node = self._root
        for segment in segments:
            child = node.children.get(segment)
            if child is None:
                return None
            node = child
        return node


def _prefix_match(entry: Entry | None) -> TrieMatch:
    if entry is None:
        return _NO_MATCH
    return TrieMatch(entry=entry, prefix=entry.pattern)

"""Path canonicalization.

One pure function, ``canonicalize``, produces the routing key for both
registered patterns and incoming request paths::

    canonicalize("")          -> "/"
    canonicalize("a/b")       -> "/a/b"
    canonicalize("//a//b/")   -> "/a/b/"
    canonicalize("/a/./b/")   -> "/a/b/"
    canonicalize("/../a")     -> "/a"

A trailing slash survives cleaning, so ``/a`` and ``/a/`` stay distinct.
"""

from urllib.parse import quote

# Sub-delims plus ":" and "@" may appear raw in a path segment (RFC 3986)
_PATH_SAFE = "/:@!$&'()*+,;="


def clean_path(path: str) -> str:
    """Lexically clean a rooted path.

    Collapses repeated separators, drops ``.`` elements and resolves
    ``..`` against the preceding element. ``..`` never climbs above the
    root. The result has no trailing slash unless it is ``/``.
    """
    stack: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if stack:
                stack.pop()
            continue
        stack.append(part)
    return "/" + "/".join(stack)


def canonicalize(path: str) -> str:
    """Return the canonical routing key for *path*."""
    if not path:
        return "/"
    if path[0] != "/":
        path = "/" + path
    cleaned = clean_path(path)
    if path[-1] == "/" and cleaned != "/":
        cleaned += "/"
    return cleaned


def is_canonical(path: str) -> bool:
    """True if *path* is already in canonical form."""
    return canonicalize(path) == path


def split_segments(canonical: str) -> tuple[tuple[str, ...], bool]:
    """Split a canonical path into its segments and a trailing-slash flag.

    ``"/"`` splits to ``((), False)``: the root is its own node and is
    always a prefix pattern.
    """
    if canonical == "/":
        return (), False
    trailing = canonical.endswith("/")
    return tuple(canonical.strip("/").split("/")), trailing


def escape_path(path: str) -> str:
    """Percent-encode a decoded path for use in a ``Location`` header.

    Non-ASCII characters go out as UTF-8 escapes, and a literal ``%``,
    ``?`` or ``#`` inside a segment is escaped so it stays part of the
    path::

        escape_path("/caf€/")   -> "/caf%E2%82%AC/"
        escape_path("/a?b/")    -> "/a%3Fb/"
    """
    return quote(path, safe=_PATH_SAFE)

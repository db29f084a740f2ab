"""Route entries — the handle returned by ``Mux.handle``.

An entry's pattern and handler never change. Route-scoped options live
in a frozen ``RouteOptions`` snapshot; each chained call swaps in a new
snapshot, so a dispatcher always reads one consistent version.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from switchyard.errors import ConfigurationError

if TYPE_CHECKING:
    from switchyard.handlers import Handler


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Per-route configuration. ``methods=None`` accepts every method."""

    methods: frozenset[str] | None = None
    name: str | None = None
    meta: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class Entry:
    """A registered route.

    Configure it in a chain right after registration::

        mux.handle("/users/", users).allow("GET", "POST").named("users")

    The entry freezes the first time the mux resolves a request to it;
    configuring a frozen entry raises ``ConfigurationError``.
    """

    __slots__ = ("_frozen", "_options", "handler", "pattern")

    def __init__(self, pattern: str, handler: Handler) -> None:
        self.pattern = pattern
        self.handler = handler
        self._options = RouteOptions()
        self._frozen = False

    def __repr__(self) -> str:
        methods = ",".join(sorted(self.methods)) if self.methods else "*"
        return f"Entry({self.pattern!r}, methods={methods})"

    # -- Read side --

    @property
    def is_prefix(self) -> bool:
        """True for patterns ending in ``/`` (including the root)."""
        return self.pattern.endswith("/")

    @property
    def options(self) -> RouteOptions:
        """The current options snapshot."""
        return self._options

    @property
    def methods(self) -> frozenset[str] | None:
        return self._options.methods

    @property
    def name(self) -> str | None:
        return self._options.name

    @property
    def meta(self) -> Mapping[str, Any]:
        return self._options.meta

    @property
    def frozen(self) -> bool:
        return self._frozen

    def allows(self, method: str) -> bool:
        """Whether this route accepts *method*. ``HEAD`` rides on ``GET``."""
        methods = self._options.methods
        if methods is None:
            return True
        method = method.upper()
        return method in methods or (method == "HEAD" and "GET" in methods)

    def allowed_methods(self) -> frozenset[str]:
        """The methods to advertise in an ``Allow`` header."""
        methods = self._options.methods or frozenset()
        if "GET" in methods:
            return methods | {"HEAD"}
        return methods

    # -- Chained configuration --

    def allow(self, *methods: str) -> Entry:
        """Restrict the route to *methods*; other methods get a 405."""
        if not methods:
            msg = f"allow() on {self.pattern} needs at least one method"
            raise ConfigurationError(msg)
        for method in methods:
            if not isinstance(method, str) or not method.strip():
                msg = f"invalid HTTP method {method!r} for {self.pattern}"
                raise ConfigurationError(msg)
        self._update(methods=frozenset(m.strip().upper() for m in methods))
        return self

    def named(self, name: str) -> Entry:
        """Attach a name for introspection."""
        self._update(name=name)
        return self

    def with_meta(self, **meta: Any) -> Entry:
        """Merge *meta* into the route's metadata mapping."""
        self._update(meta=MappingProxyType({**self._options.meta, **meta}))
        return self

    def freeze(self) -> None:
        """Reject further configuration. Called by the mux on first resolve."""
        self._frozen = True

    def _update(self, **changes: Any) -> None:
        if self._frozen:
            msg = (
                f"Cannot configure route {self.pattern} after it has served requests. "
                "Configure routes before the mux starts dispatching."
            )
            raise ConfigurationError(msg)
        self._options = replace(self._options, **changes)

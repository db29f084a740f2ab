"""Mux configuration.

MuxConfig is a frozen dataclass, fixed when the mux is built. Every knob
is off by default; the defaults route unclean paths silently.
"""

from dataclasses import dataclass

from switchyard.errors import ConfigurationError

_REDIRECT_STATUSES = frozenset({301, 302, 307, 308})


@dataclass(frozen=True, slots=True)
class MuxConfig:
    """Mux configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = MuxConfig(redirect_status=308, offload_sync_handlers=True)
    """

    # Status used for the trailing-slash (and clean-path) redirect
    redirect_status: int = 301

    # Redirect non-canonical request paths (``/a//b``) instead of
    # silently routing them under their canonical form
    redirect_unclean_paths: bool = False

    # Run sync ``serve`` methods on a worker thread
    offload_sync_handlers: bool = False

    # Body written by the synthesized 404 handler
    not_found_body: str = "404 page not found\n"

    def __post_init__(self) -> None:
        if self.redirect_status not in _REDIRECT_STATUSES:
            msg = (
                f"redirect_status must be one of {sorted(_REDIRECT_STATUSES)}, "
                f"got {self.redirect_status}"
            )
            raise ConfigurationError(msg)

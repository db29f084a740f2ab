"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Plain handler function: ``(writer, request) -> None``, sync or async
HandlerFunction: TypeAlias = Callable[..., Any]

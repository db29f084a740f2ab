"""Invoke helpers — call sync or async handlers uniformly.

A handler's ``serve`` can be ``def`` or ``async def``. Any code that calls
a user-provided handler must handle both cases. This module provides
a single helper so the sync/async check lives in exactly one place.

Usage::

    from switchyard._internal.invoke import invoke

    await invoke(handler.serve, writer, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(func: Any, *args: Any, offload: bool = False, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's a coroutine.

    With ``offload=True``, a plain (non-coroutine) function runs on an
    anyio worker thread so a blocking handler does not stall the event
    loop. Coroutine functions always run on the loop.
    """
    if offload and not _is_async_callable(func):
        result = await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
    else:
        result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_async_callable(func: Any) -> bool:
    while isinstance(func, functools.partial):
        func = func.func
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)  # noqa: B004
    return inspect.iscoroutinefunction(call)

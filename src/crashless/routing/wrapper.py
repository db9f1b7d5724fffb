"""Completion-channel adapter for route handlers.

:func:`wrap_handler` turns any handler into a coroutine function that resolves
awaitable results before returning, so a failure inside a pending computation
is raised into the framework's error channel instead of being lost.
:func:`handle_async` applies it automatically to every endpoint registered on
a FastAPI app or router from that point on.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool

_WRAPPED_MARKER = "__crashless_wrapped__"

HandlerT = TypeVar("HandlerT", bound=Callable[..., Any])


def is_wrapped(handler: Callable[..., Any]) -> bool:
    return bool(getattr(handler, _WRAPPED_MARKER, False))


async def _resolve(result: Any) -> Any:
    while inspect.isawaitable(result):
        result = await result
    return result


def wrap_handler(handler: HandlerT) -> HandlerT:
    """Wrap ``handler`` so pending results are awaited and failures raise.

    Coroutine functions are awaited on the event loop; plain functions run in
    the threadpool. Whatever they return is awaited again while it is still
    awaitable (a coroutine, task or future handed back by a sync function).
    The wrapper keeps the original signature, so FastAPI resolves parameters
    and dependencies exactly as before. Wrapping twice returns the first
    wrapper.
    """
    if is_wrapped(handler):
        return handler

    if inspect.iscoroutinefunction(handler):

        @functools.wraps(handler)
        async def wrapped(*args: Any, **kwargs: Any) -> Any:
            return await _resolve(await handler(*args, **kwargs))

    else:

        @functools.wraps(handler)
        async def wrapped(*args: Any, **kwargs: Any) -> Any:
            return await _resolve(await run_in_threadpool(handler, *args, **kwargs))

    setattr(wrapped, _WRAPPED_MARKER, True)
    return wrapped  # type: ignore[return-value]


class AsyncSafeRouteMixin:
    """Mixin for ``APIRoute`` subclasses that wraps the endpoint on creation."""

    def __init__(self, path: str, endpoint: Callable[..., Any], **kwargs: Any) -> None:
        super().__init__(path, wrap_handler(endpoint), **kwargs)  # type: ignore[call-arg]


class AsyncSafeRoute(AsyncSafeRouteMixin, APIRoute):
    pass


def _async_safe_route_class(route_class: type[APIRoute]) -> type[APIRoute]:
    if issubclass(route_class, AsyncSafeRouteMixin):
        return route_class
    if route_class is APIRoute:
        return AsyncSafeRoute
    return type(f"AsyncSafe{route_class.__name__}", (AsyncSafeRouteMixin, route_class), {})


def handle_async(target: FastAPI | APIRouter) -> FastAPI | APIRouter:
    """Wrap every endpoint registered on ``target`` from now on.

    Only the router's route class changes; routes already registered keep
    their original endpoints. A custom route class is preserved by
    subclassing it. Calling this twice is a no-op.

    Raises:
        TypeError: ``target`` is neither a FastAPI app nor an APIRouter.
    """
    if isinstance(target, FastAPI):
        router = target.router
    elif isinstance(target, APIRouter):
        router = target
    else:
        raise TypeError(f"Cannot install async handling on {type(target).__name__}")
    router.route_class = _async_safe_route_class(router.route_class)
    return target

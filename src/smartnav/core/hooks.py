"""Hook invoker (source of truth).

Every user supplied guard or lifecycle hook is called through
:func:`invoke_hook`. The hook receives a :class:`HookContext` exposing the
incoming route (``to``), the outgoing route (``from_``), ``abort()`` and
``next(data=None)``.

Guarded continuation
--------------------
Each call settles at most once: the first effective ``next``, ``abort`` or
automatic verdict wins and later ones are ignored.

``context.next`` is a no-op when no ``on_next`` callback was registered for
the call, or when the incoming route's cancel token has been cancelled
(supersession or a prior abort). Otherwise it forwards ``data`` to
``on_next``.

Result interpretation
---------------------
The hook's return value is mapped onto a single continue-or-abort effect by
:func:`resolve_outcome`:

- ``Continue(data)`` → ``next(data)``; ``Abort`` → ``abort()`` (any mode).
- boolean-expecting mode (global before hook, validation guards): ``True`` →
  ``next()``, ``False`` → ``abort()``. An awaitable is scheduled on the
  running event loop and its truthy/falsy resolution is applied the same way.
- manual mode (``deactivate``/``activate`` actions): an awaitable's result is
  forwarded with ``next(result)``.
- In both modes an awaitable that raises or is cancelled aborts.
- Anything else is left to the hook, which must call ``context.next()`` or
  ``context.abort()`` itself.

Exceptions raised synchronously by the hook propagate to the caller.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from .signals import Abort, Continue, Outcome

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .route import Route
    from .transition import Transition

__all__ = ["HookContext", "invoke_hook", "resolve_outcome"]

logger = logging.getLogger("smartnav")


class HookContext:
    """The transition object exposed to user hooks."""

    __slots__ = ("to", "from_", "_abort", "_next")

    def __init__(
        self,
        to: "Route",
        from_: Optional["Route"],
        abort: Callable[[], None],
        next: Callable[..., None],  # noqa: A002 - mirrors the hook API
    ) -> None:
        self.to = to
        self.from_ = from_
        self._abort = abort
        self._next = next

    def abort(self) -> None:
        self._abort()

    def next(self, data: Any = None) -> None:
        self._next(data)


def resolve_outcome(value: Any, *, expect_boolean: bool) -> Optional[Outcome]:
    """Map a settled hook value onto ``Continue``/``Abort``.

    Returns ``None`` when the value carries no verdict (manual mode).
    """
    if isinstance(value, (Continue, Abort)):
        return value
    if expect_boolean and isinstance(value, bool):
        return Continue() if value else Abort()
    return None


def invoke_hook(
    transition: "Transition",
    hook: Callable[[HookContext], Any],
    on_next: Optional[Callable[[Any], None]] = None,
    *,
    expect_boolean: bool = False,
) -> Any:
    """Call ``hook`` with a fresh context and apply its verdict.

    Args:
        transition: Transition owning the call.
        hook: Callable receiving the :class:`HookContext`.
        on_next: Continuation fired (at most once per ``next``) when the
            transition may proceed.
        expect_boolean: Interpret plain booleans and awaitable results as
            allow/deny verdicts.

    Returns:
        The value returned by ``hook``, or the future scheduled for it when
        the hook returned an awaitable.
    """
    token = transition.to.token
    settled = False

    def settle() -> bool:
        nonlocal settled
        if settled:
            return False
        settled = True
        return True

    def abort() -> None:
        if settle():
            transition.abort()

    def next(data: Any = None) -> None:  # noqa: A001 - mirrors the hook API
        if on_next is None or token.cancelled:
            return
        if settle():
            on_next(data)

    context = HookContext(transition.to, transition.from_, abort, next)
    result = hook(context)

    def apply(outcome: Optional[Outcome]) -> None:
        if isinstance(outcome, Continue):
            next(outcome.data)
        elif isinstance(outcome, Abort):
            abort()

    if inspect.isawaitable(result):
        loop = asyncio.get_running_loop()
        future = asyncio.ensure_future(result, loop=loop)

        def on_settled(fut: "asyncio.Future[Any]") -> None:
            if fut.cancelled():
                logger.debug("hook %r cancelled, aborting %r", hook, transition.to)
                abort()
                return
            exc = fut.exception()
            if exc is not None:
                logger.debug("hook %r rejected with %r, aborting %r", hook, exc, transition.to)
                abort()
                return
            value = fut.result()
            outcome = resolve_outcome(value, expect_boolean=expect_boolean)
            if outcome is not None:
                apply(outcome)
            elif expect_boolean:
                if value:
                    next()
                else:
                    abort()
            else:
                next(value)

        future.add_done_callback(on_settled)
        return future

    apply(resolve_outcome(result, expect_boolean=expect_boolean))
    return result

"""Sequential queue runner shared by every pipeline phase."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .transition import Transition

__all__ = ["run_queue"]

QueueOperation = Callable[["Transition", Any, Callable[..., None]], None]


def run_queue(
    transition: "Transition",
    queue: Sequence[Any],
    fn: QueueOperation,
    cb: Callable[[], None],
) -> None:
    """Apply ``fn`` to each item of ``queue`` in order, then call ``cb``.

    ``fn(transition, item, done)`` must eventually call ``done`` for the next
    item to run. Nothing runs in parallel and there is no timeout: an item
    that never calls ``done`` stalls the transition. Progress stops silently
    once the incoming route has been cancelled.
    """
    token = transition.to.token

    def step(index: int) -> None:
        if token.cancelled:
            return
        if index >= len(queue):
            cb()
            return
        fn(transition, queue[index], lambda *_: step(index + 1))

    step(0)

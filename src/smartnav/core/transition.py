"""Transition controller (source of truth).

A :class:`Transition` manages the pipeline of one navigation: switching the
router's active chain of outlets from the outgoing route to the incoming one.

Construction
------------
``Transition(router, to, from_)``

- Supersession: when ``from_`` is given its cancel token is cancelled right
  away, so continuations of any older transition still targeting it become
  inert.
- ``deactivate_queue``: snapshot of ``router.views`` (deepest first).
- ``matched``: ``to.matched`` normalized by ``expand_default_child``.
- ``activate_queue``: the handlers of ``matched`` (root first).

Pipeline
--------
Going from the chain ``[A, B]`` to ``[A, C]``::

    A    A
    | => |
    B    C

1. Reusability: ``can_reuse(A, A)``, ``can_reuse(B, C)`` → reuse ``[A]``,
   deactivate ``[B]``, activate ``[C]``.
2. Validation: ``can_deactivate(B)``, then ``can_activate(C)``.
3. Activation: ``deactivate(B)``, ``reuse()`` on A, ``activate()`` on B's
   outlet, then the completion callback.

Every step may be asynchronous and any step may abort the transition.

Abort and redirect
------------------
``abort()`` is idempotent: it cancels the incoming route, asks the router to
go back to the outgoing path (``"/"`` when there is none) and notifies the
router. The navigation back is flagged ``recovering``; when it is aborted in
turn it only cancels its route, so mutually refused paths cannot bounce.
``redirect()`` is not implemented and has no effect.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from smartnav.plugins._base_plugin import HookEntry

from . import pipeline
from .hooks import invoke_hook
from .queue import run_queue
from .route import Handler, Match, Route, expand_default_child

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .base_router import BaseRouter
    from .view import RouterView

__all__ = ["Transition"]

logger = logging.getLogger("smartnav")


class Transition:
    """One navigation from ``from_`` to ``to`` on ``router``."""

    __slots__ = (
        "router",
        "to",
        "from_",
        "aborted",
        "deactivate_queue",
        "activate_queue",
        "matched",
        "recovering",
    )

    def __init__(
        self,
        router: "BaseRouter",
        to: Route,
        from_: Optional[Route] = None,
        *,
        recovering: bool = False,
    ) -> None:
        if from_ is not None:
            from_.aborted = True
        self.router = router
        self.to = to
        self.from_ = from_
        self.aborted = False
        self.recovering = recovering
        self.deactivate_queue: List["RouterView"] = list(router.views)
        self.matched: List[Match] = expand_default_child(to.matched)
        self.activate_queue: List[Handler] = [match.handler for match in self.matched]

    def __repr__(self) -> str:
        origin = self.from_.path if self.from_ is not None else None
        return f"<Transition {origin!r} -> {self.to.path!r}{' aborted' if self.aborted else ''}>"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def abort(self) -> None:
        """Abort the transition and return to the previous location."""
        if self.aborted:
            return
        self.aborted = True
        if self.to.aborted:
            # superseded: a newer transition owns the router now
            return
        self.to.aborted = True
        if self.recovering:
            # the way back was refused as well: stay put
            logger.warning("navigation back aborted, staying on %r", self.to.path)
        else:
            logger.debug("transition aborted: %r", self)
            back = self.from_.path if self.from_ is not None else "/"
            self.router.replace(back, recovering=True)
        self.router._transition_event("abort", self)

    def redirect(self, *args: Any, **kwargs: Any) -> None:
        """Abort and redirect to a new location (not implemented, no effect)."""
        return None

    def start(self, cb: Callable[[], None]) -> None:
        """Run the global before hook (if any), then the pipeline."""
        before = self.router.before_each_hook
        if before is None:
            self.run_pipeline(cb)
            return
        hook = self.router.wrap_hook(HookEntry(name="before_each", kind="before_each", func=before))
        invoke_hook(self, hook, lambda _data: self.run_pipeline(cb), expect_boolean=True)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def run_pipeline(self, cb: Callable[[], None]) -> None:
        daq: List["RouterView"] = self.deactivate_queue
        aq: List[Handler] = self.activate_queue
        rdaq = list(reversed(daq))
        reuse_queue: List["RouterView"] = []

        reusable = 0
        for view, handler in zip(rdaq, aq):
            if not pipeline.can_reuse(self, view, handler):
                break
            reusable += 1
        if reusable > 0:
            reuse_queue = rdaq[:reusable]
            daq = list(reversed(rdaq[reusable:]))
            aq = aq[reusable:]

        def finalize() -> None:
            for view in reuse_queue:
                view.reuse()
            # only the root-most replaced outlet switches; it cascades below
            if daq:
                daq[-1].activate()
            cb()

        run_queue(
            self,
            daq,
            pipeline.can_deactivate,
            lambda: run_queue(
                self,
                aq,
                pipeline.can_activate,
                lambda: run_queue(self, daq, pipeline.deactivate, finalize),
            ),
        )

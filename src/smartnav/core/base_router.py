"""Plugin-free navigation router (source of truth).

The module exposes :class:`BaseRouter`, the collaborator every transition
talks to: it owns the chain of outlets, the current route and transition,
the global before/after hooks and the ``replace`` navigation action.
Subclasses add plugins but must preserve these semantics.

Constructor and slots
---------------------
Constructor signature::

    BaseRouter(matcher, *, root_path="/", before_each=None, after_each=None,
               navigate_defaults=None)

- ``matcher`` is required; ``None`` raises ``ValueError`` and a non-callable
  raises ``TypeError``. It maps a path to the root-to-leaf list of
  :class:`~smartnav.core.route.Match` objects (``None``/empty when nothing
  matches). Path parsing is entirely the matcher's business.
- ``navigate_defaults`` become defaults merged via ``SmartOptions`` in
  ``replace()``. Known options: ``force`` (navigate even when the path equals
  the current one) and ``recovering`` (set by ``Transition.abort`` on the
  navigation back; such a transition does not navigate again when aborted).
- Slots: ``matcher``, ``root_path``, ``views`` (outlets, deepest first),
  ``_root_view``, ``_current_route``, ``_current_transition``,
  ``_before_each_hook``, ``_after_each_hook``, ``_navigate_defaults``.

Navigation
----------
``start(path=None)`` creates the root outlet once and navigates to ``path``
(default ``root_path``).

``replace(path, **options)`` (alias ``go``; there is no history stack):

- returns ``None`` without doing anything when ``path`` equals the current
  route's path and ``force`` is false.
- builds a :class:`Route` from the matcher, creates a :class:`Transition`
  from the current route (superseding any transition still in flight),
  records route and transition as current, emits the ``start`` event and
  starts the pipeline. Returns the transition.
- when a hook raises synchronously the new route is cancelled, the previous
  route and transition are restored as current and the exception propagates.
- on completion calls the after hook with the transition, then emits
  ``complete``. Aborts emit ``abort`` (see ``Transition.abort``).

Hooks for subclasses
--------------------
- ``_wrap_hook(entry, call_next)``: override to wrap transition hooks.
- ``_transition_event(event, transition)``: ``start``/``complete``/``abort``.

Default implementations are no-ops/passthrough.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from smartseeds import SmartOptions

from smartnav.plugins._base_plugin import HookEntry

from .route import Route
from .transition import Transition
from .view import RouterView

__all__ = ["BaseRouter"]

logger = logging.getLogger("smartnav")


class BaseRouter:
    """Navigation state shared by all transitions of one view tree."""

    __slots__ = (
        "matcher",
        "root_path",
        "views",
        "_root_view",
        "_current_route",
        "_current_transition",
        "_before_each_hook",
        "_after_each_hook",
        "_navigate_defaults",
    )

    def __init__(
        self,
        matcher: Callable[[str], Any],
        *,
        root_path: str = "/",
        before_each: Optional[Callable] = None,
        after_each: Optional[Callable] = None,
        navigate_defaults: Optional[Dict[str, Any]] = None,
    ) -> None:
        if matcher is None:
            raise ValueError("Router requires a matcher")
        if not callable(matcher):
            raise TypeError("matcher must be callable")
        self.matcher = matcher
        self.root_path = root_path
        self.views: List[RouterView] = []
        self._root_view: Optional[RouterView] = None
        self._current_route: Optional[Route] = None
        self._current_transition: Optional[Transition] = None
        self._before_each_hook = before_each
        self._after_each_hook = after_each
        self._navigate_defaults: Dict[str, Any] = dict(navigate_defaults or {})

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def current_route(self) -> Optional[Route]:
        return self._current_route

    @property
    def current_transition(self) -> Optional[Transition]:
        return self._current_transition

    @property
    def root_view(self) -> Optional[RouterView]:
        return self._root_view

    @property
    def before_each_hook(self) -> Optional[Callable]:
        return self._before_each_hook

    @property
    def after_each_hook(self) -> Optional[Callable]:
        return self._after_each_hook

    def before_each(self, hook: Optional[Callable]) -> Optional[Callable]:
        """Set the global guard run before every pipeline (usable as decorator)."""
        self._before_each_hook = hook
        return hook

    def after_each(self, hook: Optional[Callable]) -> Optional[Callable]:
        """Set the callback run with each completed transition (usable as decorator)."""
        self._after_each_hook = hook
        return hook

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def start(self, path: Optional[str] = None, **options: Any) -> Optional[Transition]:
        """Create the root outlet (once) and navigate to ``path``."""
        if self._root_view is None:
            self._root_view = RouterView(self)
        return self.replace(path or self.root_path, **options)

    def replace(self, path: str, **options: Any) -> Optional[Transition]:
        """Navigate to ``path`` and return the transition started for it."""
        opts = SmartOptions(options, defaults=self._navigate_defaults)
        force = bool(getattr(opts, "force", False))
        previous = self._current_route
        if previous is not None and previous.path == path and not force:
            return None
        recovering = bool(getattr(opts, "recovering", False))
        previous_transition = self._current_transition
        route = Route(path, self.matcher(path) or ())
        transition = Transition(self, route, previous, recovering=recovering)
        self._current_route = route
        self._current_transition = transition
        logger.debug("transition started: %r", transition)
        self._transition_event("start", transition)
        try:
            transition.start(lambda: self._post_transition(transition))
        except BaseException:
            route.aborted = True
            if self._current_transition is transition:
                self._current_route = previous
                self._current_transition = previous_transition
            raise
        return transition

    go = replace

    def _post_transition(self, transition: Transition) -> None:
        if self._after_each_hook is not None:
            self._after_each_hook(transition)
        self._transition_event("complete", transition)

    # ------------------------------------------------------------------
    # Hook wrapping
    # ------------------------------------------------------------------
    def wrap_hook(self, entry: HookEntry) -> Callable:
        """Return the callable to invoke for ``entry`` (wrapped by subclasses)."""
        return self._wrap_hook(entry, entry.func)

    def _wrap_hook(
        self, entry: HookEntry, call_next: Callable
    ) -> Callable:  # pragma: no cover - overridden by plugin routers
        return call_next

    def _transition_event(
        self, event: str, transition: Transition
    ) -> None:  # pragma: no cover - hook for subclasses
        """Hook invoked on ``start``, ``complete`` and ``abort``."""
        return None

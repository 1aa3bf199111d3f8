"""Routed views and their outlets (source of truth).

``RoutedView``
--------------
Base class of every component shown by an outlet. Subclasses declare
transition hooks by marking methods with :func:`smartnav.core.decorators.hook`:

- ``can_reuse`` (instance): may the component stay in place for the new
  route? Falls back to the ``reusable`` class attribute (default ``True``).
  Synchronous only: an awaitable result raises ``TypeError``.
- ``can_deactivate`` (instance, boolean-expecting): may the component leave?
- ``deactivate`` (instance, manual): teardown work before the swap.
- ``can_activate`` (class-level, boolean-expecting): may a new component be
  built? Must be a ``classmethod`` or ``staticmethod``.
- ``activate`` (instance, manual): runs on the freshly built component; the
  component is swapped in when it calls ``next()``.

Hooks are discovered by walking the reversed MRO; a subclass marker for the
same kind wins. ``nested = True`` makes a mounted component create a child
outlet one level deeper and activate it.

``RouterView``
--------------
The view node of the transition pipeline. Outlets register themselves in
``router.views`` (deepest first) on creation and leave it on ``unbind()``.

- ``activate()`` builds the component for the outlet's depth from the router's
  current transition, runs its ``activate`` hook, then tears down the old
  subtree and mounts the new component (cascading into nested outlets). With
  no handler at its depth the outlet is cleared.
- ``reuse()`` reconfigures the current component with the new route and the
  params of its depth.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional, Tuple

from smartnav.core.hooks import invoke_hook
from smartnav.plugins._base_plugin import HookEntry

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .base_router import BaseRouter
    from .route import Route
    from .transition import Transition

__all__ = [
    "HOOK_ATTR_NAME",
    "HOOK_KINDS",
    "RoutedView",
    "RouterView",
    "collect_hooks",
    "find_hook",
    "resolve_hook",
]

HOOK_ATTR_NAME = "__smartnav_hooks__"
HOOK_KINDS = ("can_reuse", "can_activate", "can_deactivate", "deactivate", "activate")


class RoutedView:
    """Component instantiated by an outlet for one level of a route."""

    __slots__ = ("outlet", "route", "params", "child")

    reusable = True
    nested = False

    def __init__(self, outlet: "RouterView", route: "Route", params: Dict[str, Any]) -> None:
        self.outlet = outlet
        self.route = route
        self.params = dict(params)
        self.child: Optional[RouterView] = None

    def mount(self) -> None:
        """Create and activate the nested outlet when ``nested`` is set."""
        if self.nested and self.child is None:
            self.child = RouterView(self.outlet.router, parent=self.outlet)
            self.child.activate()

    def reconfigure(self, route: "Route", params: Dict[str, Any]) -> None:
        self.route = route
        self.params = dict(params)

    def destroy(self) -> None:
        if self.child is not None:
            self.child.unbind()
            self.child = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} params={self.params!r}>"


class RouterView:
    """View node: one outlet in the router's active chain."""

    __slots__ = ("router", "parent", "depth", "component")

    def __init__(self, router: "BaseRouter", parent: Optional["RouterView"] = None) -> None:
        self.router = router
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1
        self.component: Optional[RoutedView] = None
        router.views.insert(0, self)

    def _resolve(self, transition: "Transition") -> Tuple[Any, Dict[str, Any]]:
        if self.depth >= len(transition.matched):
            return None, {}
        match = transition.matched[self.depth]
        return match.handler, match.params

    def activate(self) -> None:
        transition = self.router.current_transition
        if transition is None:
            self._swap(None)
            return
        handler, params = self._resolve(transition)
        if handler is None or handler.view is None:
            self._swap(None)
            return
        component = handler.view(self, transition.to, params)
        hook = resolve_hook(self.router, component, "activate")
        if hook is None:
            self._swap(component)
            return
        invoke_hook(transition, hook, lambda _data: self._swap(component))

    def reuse(self) -> None:
        transition = self.router.current_transition
        if transition is None or self.component is None:
            return
        _, params = self._resolve(transition)
        self.component.reconfigure(transition.to, params)

    def unbind(self) -> None:
        """Destroy the current subtree and leave the router chain."""
        self._swap(None)
        if self in self.router.views:
            self.router.views.remove(self)

    def _swap(self, component: Optional[RoutedView]) -> None:
        previous = self.component
        if previous is not None:
            previous.destroy()
        self.component = component
        if component is not None:
            component.mount()

    def __repr__(self) -> str:
        return f"<RouterView depth={self.depth} component={self.component!r}>"


# ----------------------------------------------------------------------
# Hook discovery
# ----------------------------------------------------------------------
def _iter_marked_hooks(cls: type) -> Iterator[Tuple[str, str]]:
    seen: set[int] = set()
    for base in reversed(cls.__mro__):
        for attr_name, value in vars(base).items():
            func = value.__func__ if isinstance(value, (staticmethod, classmethod)) else value
            if not inspect.isfunction(func):
                continue
            if id(func) in seen:
                continue
            seen.add(id(func))
            for kind in getattr(func, HOOK_ATTR_NAME, ()):
                yield kind, attr_name


def collect_hooks(cls: type) -> Dict[str, str]:
    """Return hook kind → attribute name for ``cls`` (subclass markers win)."""
    return dict(_iter_marked_hooks(cls))


def find_hook(target: Any, kind: str) -> Optional[Callable]:
    """Return the bound hook of ``kind`` on a view class or instance."""
    cls = target if isinstance(target, type) else type(target)
    attr_name = collect_hooks(cls).get(kind)
    if attr_name is None:
        return None
    if isinstance(target, type):
        raw = inspect.getattr_static(target, attr_name)
        if not isinstance(raw, (staticmethod, classmethod)):
            raise TypeError(
                f"{cls.__name__}.{attr_name} must be a classmethod or staticmethod "
                f"to serve as a {kind!r} hook"
            )
    return getattr(target, attr_name)


def resolve_hook(router: "BaseRouter", target: Any, kind: str) -> Optional[Callable]:
    """Find the ``kind`` hook on ``target`` and wrap it with the router plugins."""
    func = find_hook(target, kind)
    if func is None:
        return None
    view = target if isinstance(target, type) else type(target)
    entry = HookEntry(name=f"{view.__name__}.{kind}", kind=kind, func=func, view=view)
    return router.wrap_hook(entry)

"""Per-item pipeline operations driven by the queue runner.

Each function resolves the matching hook through the router (so plugins can
wrap it) and falls back to an immediate ``next()`` when the view declares no
hook for that step.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, Optional

from .hooks import HookContext, invoke_hook
from .view import resolve_hook

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .route import Handler
    from .transition import Transition
    from .view import RouterView

__all__ = ["can_activate", "can_deactivate", "can_reuse", "deactivate"]


def can_reuse(transition: "Transition", view: "RouterView", handler: Optional["Handler"]) -> bool:
    """Return True when ``view``'s component can stay in place for ``handler``."""
    component = view.component
    if handler is None or component is None:
        return False
    if type(component) is not handler.view:
        return False
    hook = resolve_hook(transition.router, component, "can_reuse")
    if hook is None:
        return bool(component.reusable)
    context = HookContext(transition.to, transition.from_, transition.abort, _ignore)
    result = hook(context)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError(f"can_reuse hook of {type(component).__name__} must return a plain value")
    return bool(result)


def can_deactivate(
    transition: "Transition", view: "RouterView", next: Callable[..., None]  # noqa: A002
) -> None:
    hook = _component_hook(transition, view, "can_deactivate")
    if hook is None:
        next()
        return
    invoke_hook(transition, hook, next, expect_boolean=True)


def can_activate(
    transition: "Transition", handler: "Handler", next: Callable[..., None]  # noqa: A002
) -> None:
    hook = None
    if handler.view is not None:
        hook = resolve_hook(transition.router, handler.view, "can_activate")
    if hook is None:
        next()
        return
    invoke_hook(transition, hook, next, expect_boolean=True)


def deactivate(
    transition: "Transition", view: "RouterView", next: Callable[..., None]  # noqa: A002
) -> None:
    hook = _component_hook(transition, view, "deactivate")
    if hook is None:
        next()
        return
    invoke_hook(transition, hook, next)


def _component_hook(transition: "Transition", view: "RouterView", kind: str) -> Optional[Callable]:
    if view.component is None:
        return None
    return resolve_hook(transition.router, view.component, kind)


def _ignore(data: Any = None) -> None:
    return None

"""Decorator helpers for marking transition hooks (source of truth).

``hook(kind)``

- Returns a decorator appending ``kind`` to the list stored on the function
  under ``HOOK_ATTR_NAME``. ``kind`` must be one of ``HOOK_KINDS``; anything
  else raises ``ValueError``.
- Works above or below ``@classmethod``/``@staticmethod``: descriptors are
  unwrapped to mark the underlying function and returned unchanged.
- Existing markers are preserved, so one function can serve several kinds.
- No router or view state is touched at decoration time; discovery happens
  in :func:`smartnav.core.view.collect_hooks`.

Re-exports
----------
``RoutedView`` and ``Router`` are re-exported so user code can import
everything from one place.
"""

from __future__ import annotations

from typing import Any, Callable

from .router import Router
from .view import HOOK_ATTR_NAME, HOOK_KINDS, RoutedView

__all__ = ["hook", "RoutedView", "Router"]


def hook(kind: str) -> Callable[[Any], Any]:
    """Mark a ``RoutedView`` method as the ``kind`` transition hook.

    Args:
        kind: One of ``can_reuse``, ``can_activate``, ``can_deactivate``,
            ``deactivate``, ``activate``.
    """
    if kind not in HOOK_KINDS:
        raise ValueError(f"Unknown hook kind {kind!r}. Expected one of: {', '.join(HOOK_KINDS)}")

    def decorator(target: Any) -> Any:
        func = target.__func__ if isinstance(target, (staticmethod, classmethod)) else target
        markers = list(getattr(func, HOOK_ATTR_NAME, []))
        if kind not in markers:
            markers.append(kind)
        setattr(func, HOOK_ATTR_NAME, markers)
        return target

    return decorator

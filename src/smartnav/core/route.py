"""Route, match and handler descriptors consumed by transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .signals import CancelToken
from .view import RoutedView

__all__ = ["Handler", "Match", "Route", "expand_default_child"]


class Handler:
    """Describe the view type shown for one level of a matched path.

    Args:
        view: ``RoutedView`` subclass instantiated by the outlet at this depth,
            or ``None`` for a handler that renders nothing.
        name: Optional label (defaults to the view class name).
        default_child: Handler activated beneath this one when it is the
            deepest match of a route.
    """

    __slots__ = ("view", "name", "default_child")

    def __init__(
        self,
        view: Optional[type] = None,
        *,
        name: Optional[str] = None,
        default_child: Optional["Handler"] = None,
    ) -> None:
        if view is not None and not (isinstance(view, type) and issubclass(view, RoutedView)):
            raise TypeError(f"Handler view must be a RoutedView subclass, got {view!r}")
        if default_child is not None and not isinstance(default_child, Handler):
            raise TypeError("default_child must be a Handler")
        self.view = view
        self.name = name or (view.__name__ if view is not None else "")
        self.default_child = default_child

    def __repr__(self) -> str:
        return f"<Handler {self.name or '?'}>"


@dataclass
class Match:
    """One level of a matched path: the handler and its captured params."""

    handler: Handler
    params: Dict[str, Any] = field(default_factory=dict)


class Route:
    """Navigation target: path, root-to-leaf matches and a cancel token."""

    __slots__ = ("path", "matched", "params", "token")

    def __init__(self, path: str, matched: Optional[Iterable[Match]] = None) -> None:
        self.path = path
        self.matched: List[Match] = list(matched or [])
        params: Dict[str, Any] = {}
        for match in self.matched:
            params.update(match.params)
        self.params = params
        self.token = CancelToken()

    @property
    def aborted(self) -> bool:
        return self.token.cancelled

    @aborted.setter
    def aborted(self, value: bool) -> None:
        if not value:
            raise ValueError("An aborted route cannot be revived")
        self.token.cancel()

    def __repr__(self) -> str:
        return f"<Route {self.path!r}{' aborted' if self.aborted else ''}>"


def expand_default_child(matched: Iterable[Match]) -> List[Match]:
    """Return ``matched`` plus a synthetic match for the deepest default child."""
    chain = list(matched)
    if not chain:
        return chain
    default = chain[-1].handler.default_child
    if default is not None:
        chain.append(Match(default, {}))
    return chain

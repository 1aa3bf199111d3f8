"""Cancellation token and tagged hook outcomes.

``CancelToken``
    Shared flag owned by a :class:`~smartnav.core.route.Route`. A transition
    captures the token of its incoming route; every guard continuation checks
    it before producing an effect. Cancelling is one-way.

``Continue`` / ``Abort``
    Tagged results a guard may return directly instead of a boolean, an
    awaitable, or manual ``next()``/``abort()`` calls. ``ABORT`` is the shared
    ``Abort`` instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

__all__ = ["ABORT", "Abort", "CancelToken", "Continue", "Outcome"]


class CancelToken:
    """One-way cancellation flag shared by a route and its continuations."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"<CancelToken {state}>"


@dataclass(frozen=True)
class Continue:
    """Let the transition proceed, optionally forwarding ``data``."""

    data: Any = None


@dataclass(frozen=True)
class Abort:
    """Stop the transition and navigate back."""


ABORT = Abort()

Outcome = Union[Continue, Abort]

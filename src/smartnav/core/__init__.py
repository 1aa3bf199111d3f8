"""Core runtime aggregator (source of truth).

Purpose: expose the transition runtime building blocks from a single module.
No extra logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register plugins or
  instantiate routers.
- Public API mirrors underlying modules 1:1:
  * ``signals`` → ``CancelToken``, ``Continue``, ``Abort``, ``ABORT``
  * ``route`` → ``Handler``, ``Match``, ``Route``
  * ``view`` → ``RoutedView``, ``RouterView``
  * ``hooks`` → ``HookContext``, ``invoke_hook``
  * ``queue`` → ``run_queue``
  * ``transition`` → ``Transition``
  * ``base_router`` → ``BaseRouter`` (plugin-free navigation)
  * ``router`` → ``Router`` (plugin-enabled)
  * ``decorators`` → ``hook`` helper
"""

from .signals import ABORT, Abort, CancelToken, Continue
from .route import Handler, Match, Route
from .view import RoutedView, RouterView
from .hooks import HookContext, invoke_hook
from .queue import run_queue
from .transition import Transition
from .base_router import BaseRouter
from .router import Router
from .decorators import hook

__all__ = [
    "ABORT",
    "Abort",
    "BaseRouter",
    "CancelToken",
    "Continue",
    "Handler",
    "HookContext",
    "Match",
    "Route",
    "RoutedView",
    "Router",
    "RouterView",
    "Transition",
    "hook",
    "invoke_hook",
    "run_queue",
]

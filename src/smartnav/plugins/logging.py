"""Logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
- Wrap each transition hook call and emit configurable messages:
  * ``before`` (default True): ``"{entry.name} start"``
  * ``after`` (default True): ``"{entry.name} end (<ms> ms)"`` with the time
    spent in the hook call in milliseconds and ``{elapsed:.2f}`` formatting.
    Awaitables returned by hooks are not awaited; only the call is timed.
- Report transition events when ``transitions`` is true (default True):
  ``"transition <from> -> <to> start|complete|aborted"`` where ``<from>`` is
  ``-`` for the first navigation.
- Sinks:
  * when ``print`` is true → always ``print(message)``;
  * else when ``log`` is true → ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else → no output.
- ``enabled`` gates the plugin entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("smartnav")``).

Configuration
-------------
- Accepted keys (router-level or per-hook selector): ``enabled``, ``before``,
  ``after``, ``transitions``, ``log``, ``print``. Flags strings such as
  ``"enabled:off,before:on"`` are parsed by ``BasePlugin``.
- Runtime: ``router.logging.configure(...)`` or
  ``router.configure("logging/Home.*", before=False)``.

Behaviour and API
-----------------
- ``LoggingPlugin(router, logger=None, **cfg)`` stores ``logger`` in
  ``self._logger`` and delegates to ``BasePlugin``.
- ``wrap_hook(router, entry, call_next)`` applies the configuration on each
  call. Exceptions propagate; the end message is skipped when an exception is
  raised.

Registration
------------
At module import, the plugin registers itself globally as ``"logging"`` via
``Router.register_plugin(LoggingPlugin)``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from smartnav.core.router import Router
from smartnav.plugins._base_plugin import BasePlugin, HookEntry

_EVENT_LABELS = {"start": "start", "complete": "complete", "abort": "aborted"}


class LoggingPlugin(BasePlugin):
    """Logs transition hooks with timing and transition lifecycle events."""

    plugin_code = "logging"
    plugin_description = "Logs transition hooks with timing"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("smartnav")
        super().__init__(router, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        transitions: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, cfg: dict) -> None:
        if cfg["print"]:
            print(message)
        elif cfg["log"]:
            # an unconfigured logger would drop the message
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    def wrap_hook(self, router, entry: HookEntry, call_next: Callable):
        """Wrap a hook with start/end logging and timing."""

        def timed(*args: Any, **kwargs: Any):
            cfg = self._effective_config(entry.name)
            if not cfg["enabled"]:
                return call_next(*args, **kwargs)
            if cfg["before"]:
                self._emit(f"{entry.name} start", cfg)
            started = time.perf_counter()
            result = call_next(*args, **kwargs)
            if cfg["after"]:
                elapsed = (time.perf_counter() - started) * 1000
                self._emit(f"{entry.name} end ({elapsed:.2f} ms)", cfg)
            return result

        return timed

    def on_transition(self, router, transition, event: str) -> None:
        cfg = self._effective_config()
        if not cfg["enabled"] or not cfg["transitions"]:
            return
        origin = transition.from_.path if transition.from_ is not None else "-"
        label = _EVENT_LABELS.get(event, event)
        self._emit(f"transition {origin} -> {transition.to.path} {label}", cfg)

    def _effective_config(self, entry_name: Optional[str] = None) -> dict:
        defaults = {
            "enabled": True,
            "before": True,
            "after": True,
            "transitions": True,
            "log": True,
            "print": False,
        }
        cfg = defaults | self.configuration(entry_name)
        flags = cfg.pop("flags", None)
        if isinstance(flags, str):
            cfg.update(self._parse_flags(flags))

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Router.register_plugin(LoggingPlugin)

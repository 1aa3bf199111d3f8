"""Plugin contract definitions used by the Router runtime.

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

Objects
~~~~~~~
``HookEntry``
    Dataclass describing one transition hook at the moment it is resolved.
    Fields:

    - ``name`` – ``"<ViewClass>.<kind>"`` or ``"before_each"``
    - ``kind`` – hook kind (``can_reuse``, ``can_activate``, ...)
    - ``func`` – bound callable invoked with the hook context
    - ``view`` – ``RoutedView`` subclass owning the hook (``None`` for global hooks)
    - ``metadata`` – mutable dict plugins may annotate

``BasePlugin``
    Base class that every plugin *must* subclass. Responsibilities:

    - offer config helpers that delegate to the owning router's ``plugin_info``
      store (no hidden per-plugin globals)
    - provide optional hooks ``wrap_hook(router, entry, call_next)`` and
      ``on_transition(router, transition, event)`` used by the Router

    Required class attributes:

    - ``plugin_code`` – unique identifier used for registration (e.g. "logging")
    - ``plugin_description`` – human-readable description of the plugin

    Constructor signature:

    ``BasePlugin(router, **config)``

    - ``router`` is required – the Router instance owning this plugin
    - ``**config`` is passed to ``configure()`` which is validated by Pydantic

    Required methods:

    ``configure(**config)``
        Define accepted configuration parameters via method signature.
        The method is automatically wrapped by ``__init_subclass__`` to:
        - Extract and parse ``flags`` (e.g. "enabled,before:off") into booleans
        - Extract ``_target`` to determine where to write config:
          - ``"--base--"`` (default): router-level config
          - ``"Home.can_deactivate"`` or a pattern like ``"Home.*"``:
            per-hook config
          - ``"p1,p2"``: several selectors (calls recursively)
        - Apply Pydantic's ``validate_call`` for parameter validation
        - Write validated config to the store

    ``configuration(entry_name=None)``
        returns merged configuration dict from the router's store: router-level
        values, then every selector bucket whose pattern matches ``entry_name``
        (``fnmatchcase``) in insertion order, then the exact-name bucket.

    ``wrap_hook`` (default identity function)
        used by the Router to create middleware layers around transition hooks.
        Plugin authors receive the router, the HookEntry, and the next callable;
        they must return a callable with the same signature.

    ``on_transition`` (default no-op)
        called by the Router with ``event`` in ``start``, ``complete``, ``abort``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from pydantic import validate_call

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from smartnav.core.transition import Transition

__all__ = ["BasePlugin", "HookEntry"]


@dataclass
class HookEntry:
    """Metadata for a resolved transition hook."""

    name: str
    kind: str
    func: Callable
    view: Optional[type] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, _target, validation, and storage."""
    validated = validate_call(original_configure)

    def wrapper(self: "BasePlugin", *, _target: str = "--base--", flags: Optional[str] = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        if "," in _target:
            targets = [t.strip() for t in _target.split(",") if t.strip()]
            for t in targets:
                wrapper(self, _target=t, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for router plugins."""

    __slots__ = ("name", "_router")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(
        self,
        router: Any,
        **config: Any,
    ):
        self.name = self.plugin_code
        self._router = router
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        """Initialize plugin bucket in router's store."""
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault(
            "--base--", {"config": {"enabled": True}, "locals": {}}
        )

    def configure(self, *, _target: str = "--base--", flags: Optional[str] = None) -> None:
        """Override in subclasses to define accepted configuration parameters.

        Base implementation accepts no additional parameters beyond _target and flags.

        Args:
            _target: Where to write config. "--base--" for router-level, a hook
                     entry name or fnmatch pattern for per-hook config, or
                     "p1,p2" for several selectors.
            flags: String like "enabled,before:off" parsed into booleans.
        """
        if flags:
            kwargs = self._parse_flags(flags)
            self._write_config(_target, kwargs)

    def _write_config(self, target: str, config: Dict[str, Any]) -> None:
        """Write config to the appropriate bucket in the store."""
        if not config:
            return
        store = self._get_store()
        plugin_bucket = store.setdefault(self.name, {})
        bucket = plugin_bucket.setdefault(target, {"config": {}, "locals": {}})
        bucket["config"].update(config)

    def configuration(self, entry_name: Optional[str] = None) -> Dict[str, Any]:
        """Read merged configuration (base + selectors matching ``entry_name``)."""
        store = self._get_store()
        plugin_bucket = store.get(self.name)
        if not plugin_bucket:
            return {}
        base_bucket = plugin_bucket.get("--base--", {})
        merged = dict(self._resolve_config(base_bucket.get("config", {})))
        if not entry_name:
            return merged
        for selector, bucket in plugin_bucket.items():
            if selector in ("--base--", entry_name):
                continue
            if fnmatchcase(entry_name, selector):
                merged.update(self._resolve_config(bucket.get("config", {})))
        exact = plugin_bucket.get(entry_name)
        if exact:
            merged.update(self._resolve_config(exact.get("config", {})))
        return merged

    def _resolve_config(self, config: Any) -> Dict[str, Any]:
        """Resolve config value - if callable, call it to get the dict."""
        if callable(config):
            return config()
        if config is None:
            return {}
        return config

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def wrap_hook(
        self,
        router: Any,
        entry: HookEntry,
        call_next: Callable,
    ) -> Callable:
        """Wrap hook invocation; default passthrough."""
        return call_next

    def on_transition(
        self, router: Any, transition: "Transition", event: str
    ) -> None:  # pragma: no cover - default no-op
        """Hook run on transition ``start``, ``complete`` and ``abort``."""

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._router, "_plugin_info")

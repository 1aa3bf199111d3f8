"""Router with plugin pipeline (source of truth).

If this module disappeared, rebuild it exactly as described. ``Router`` extends
``BaseRouter`` with a global plugin registry, per-router plugin instances,
transition hook wrapping, and plugin state stored on the router instance.

Internal state
--------------
- ``_plugin_specs``: list of ``_PluginSpec`` (factory, kwargs copy).
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name → plugin instance.
- ``_plugin_info``: per-plugin state store on the router.

Global registry
---------------
``Router.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a subclass of ``BasePlugin`` defining ``plugin_code``.
Registering a different class under an existing code raises ``ValueError``
unless ``name`` is given explicitly (intentional replacement).
``available_plugins`` returns a shallow copy of the registry.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` looks up the plugin class by name in the global
registry (raises ``ValueError`` with available names if missing), stores a
``_PluginSpec``, instantiates the plugin and returns ``self``. ``__getattr__``
exposes attached plugins by name or raises ``AttributeError``.

Runtime flags
-------------
Stored on the router under ``_plugin_info[plugin_code]`` using a reserved
``"--base--"`` bucket for router-level defaults and one bucket per hook
selector, each with ``config`` and ``locals``. ``set_plugin_enabled`` /
``is_plugin_enabled`` read/write the ``locals`` of the exact entry name.

Wrapping pipeline
-----------------
``_wrap_hook(entry, call_next)`` builds middleware layers from the current
``_plugins`` in reverse order (last attached closest to the hook). For each
plugin, it calls ``plugin.wrap_hook(self, entry, wrapped)`` to produce a
callable, then wraps it with a guard that skips the plugin layer when
``is_plugin_enabled`` is False. Hooks are wrapped when resolved, so plugins
attached later apply to the next transition.

Transition events
-----------------
``_transition_event(event, transition)`` forwards ``start``/``complete``/
``abort`` to every plugin's ``on_transition`` in attachment order.

Configuration entrypoint
------------------------
``configure(target, **options)`` accepts:

- list/tuple: configure each element; shared ``options`` not allowed.
- dict: must include ``"target"``; remaining items are options.
- string: ``"?"`` (describe plugins) or ``"plugin[/selector]"`` where the
  selector is a comma-separated list of fnmatch patterns over hook entry
  names; the default selector ``"_all_"`` writes router-level config.

Invariants
----------
- Plugin order is deterministic (first attached = outermost layer).
- Global registry changes do not mutate existing router instances.
- Plugin access via attribute never fails silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

from smartnav.core.base_router import BaseRouter
from smartnav.plugins._base_plugin import BasePlugin, HookEntry

__all__ = ["Router"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


@dataclass
class _PluginSpec:
    factory: Type[BasePlugin]
    kwargs: Dict[str, Any]

    def instantiate(self, router: "Router") -> BasePlugin:
        return self.factory(router=router, **self.kwargs)


class Router(BaseRouter):
    """Router with plugin registry/hook wrapping support."""

    __slots__ = BaseRouter.__slots__ + (
        "_plugin_specs",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(self, *args, **kwargs):
        self._plugin_specs: List[_PluginSpec] = []
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "Router":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        spec = _PluginSpec(plugin_class, dict(config))
        self._plugin_specs.append(spec)
        instance = spec.instantiate(self)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def get_config(self, plugin_name: str, entry_name: Optional[str] = None) -> Dict[str, Any]:
        """Return plugin config (global + per-hook overrides) for an attached plugin."""
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return plugin.configuration(entry_name)

    def __getattr__(self, name: str) -> Any:
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router")
        return plugin

    def _get_plugin_bucket(self, plugin_name: str) -> Dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        if "--base--" not in bucket:
            bucket["--base--"] = {"config": {}, "locals": {}}
        return bucket

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def set_plugin_enabled(self, entry_name: str, plugin_name: str, enabled: bool = True) -> None:
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(entry_name, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, entry_name: str, plugin_name: str) -> bool:
        bucket = self._get_plugin_bucket(plugin_name)
        entry_locals = bucket.get(entry_name, {}).get("locals", {})
        if "enabled" in entry_locals:
            return bool(entry_locals["enabled"])
        base_locals = bucket["--base--"].get("locals", {})
        return bool(base_locals.get("enabled", True))

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure(self, target: Any, **options: Any):
        if isinstance(target, (list, tuple)):
            if options:
                raise ValueError("Do not mix shared kwargs with list targets")
            return [self.configure(entry) for entry in target]
        if isinstance(target, dict):
            entry = dict(target)
            try:
                entry_target = entry.pop("target")
            except KeyError:
                raise ValueError("Dict targets must include 'target'")
            return self.configure(entry_target, **entry)
        if not isinstance(target, str):
            raise TypeError("Target must be a string, dict, or list")
        target = target.strip()
        if target == "?":
            if options:
                raise ValueError("Options are not allowed with '?'")
            return self._describe()
        plugin_name, selector = self._parse_target(target)
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        if not options:
            raise ValueError("No configuration options provided")
        if selector.lower() == "_all_":
            plugin.configure(_target="--base--", **options)
            return {"target": target, "updated": ["_all_"]}
        patterns = [token.strip() for token in selector.split(",") if token.strip()]
        for pattern in patterns:
            plugin.configure(_target=pattern, **options)
        return {"target": target, "updated": patterns}

    def _parse_target(self, target: str) -> tuple[str, str]:
        if "/" in target:
            plugin_part, selector = target.split("/", 1)
        else:
            plugin_part, selector = target, "_all_"
        plugin_part = plugin_part.strip()
        selector = selector.strip() or "_all_"
        if not plugin_part:
            raise ValueError("Plugin name cannot be empty")
        return plugin_part, selector

    def _describe(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for plugin in self._plugins:
            bucket = self._plugin_info.get(plugin.name, {})
            result[plugin.name] = {
                "description": plugin.plugin_description,
                "config": plugin.configuration(),
                "overrides": {
                    selector: dict(slot.get("config", {}))
                    for selector, slot in bucket.items()
                    if selector != "--base--"
                },
            }
        return result

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _wrap_hook(self, entry: HookEntry, call_next: Callable) -> Callable:  # type: ignore[override]
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_hook(self, entry, wrapped)
            wrapped = self._create_wrapper(plugin, entry, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        entry: HookEntry,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(*args, **kwargs):
            if not self.is_plugin_enabled(entry.name, plugin.name):
                return next_handler(*args, **kwargs)
            return plugin_call(*args, **kwargs)

        return wrapper

    def _transition_event(self, event: str, transition: Any) -> None:  # type: ignore[override]
        for plugin in self._plugins:
            plugin.on_transition(self, transition, event)

"""Tests for the router plugin registry, hook wrapping and configuration."""

import pytest

import smartnav.plugins.logging  # noqa: F401
from smartnav import Handler, Match, RoutedView, Router, hook
from smartnav.core.base_router import BaseRouter
from smartnav.plugins._base_plugin import BasePlugin

events = []


class Page(RoutedView):
    @classmethod
    @hook("can_activate")
    def allow(cls, transition):
        events.append(("hook", "Page.can_activate"))
        return True


class OuterPlugin(BasePlugin):
    plugin_code = "trace_outer"
    plugin_description = "Records wrapping order (outer)"

    def wrap_hook(self, router, entry, call_next):
        def traced(*args, **kwargs):
            events.append((self.name, "before", entry.name))
            result = call_next(*args, **kwargs)
            events.append((self.name, "after", entry.name))
            return result

        return traced

    def on_transition(self, router, transition, event):
        events.append((self.name, event, transition.to.path))


class InnerPlugin(OuterPlugin):
    plugin_code = "trace_inner"
    plugin_description = "Records wrapping order (inner)"


Router.register_plugin(OuterPlugin)
Router.register_plugin(InnerPlugin)


@pytest.fixture(autouse=True)
def _reset_events():
    events.clear()
    yield
    events.clear()


def make_router(**kwargs):
    return Router(lambda path: [Match(Handler(Page))], **kwargs)


def test_router_requires_callable_matcher():
    with pytest.raises(ValueError):
        Router(None)
    with pytest.raises(TypeError):
        Router("not callable")


def test_plugins_wrap_in_attachment_order():
    router = make_router().plug("trace_outer").plug("trace_inner")

    router.start("/page")

    hook_events = [e for e in events if e[0] == "hook" or e[2] == "Page.can_activate"]
    assert hook_events == [
        ("trace_outer", "before", "Page.can_activate"),
        ("trace_inner", "before", "Page.can_activate"),
        ("hook", "Page.can_activate"),
        ("trace_inner", "after", "Page.can_activate"),
        ("trace_outer", "after", "Page.can_activate"),
    ]
    assert ("trace_outer", "start", "/page") in events
    assert events[-1] == ("trace_inner", "complete", "/page")


def test_disabled_plugin_layer_is_skipped():
    router = make_router().plug("trace_outer").plug("trace_inner")
    router.set_plugin_enabled("Page.can_activate", "trace_outer", False)

    router.start("/page")

    assert ("trace_outer", "before", "Page.can_activate") not in events
    assert ("trace_inner", "before", "Page.can_activate") in events


def test_base_router_does_not_wrap():
    router = BaseRouter(lambda path: [Match(Handler(Page))])
    router.start("/page")
    assert events == [("hook", "Page.can_activate")]


def test_plugin_attribute_access():
    router = make_router().plug("logging")
    assert router.logging is router.iter_plugins()[0]
    with pytest.raises(AttributeError):
        router.missing_plugin  # noqa: B018


def test_plug_rejects_unknown_and_non_string():
    router = make_router()
    with pytest.raises(ValueError, match="Unknown plugin"):
        router.plug("nope")
    with pytest.raises(TypeError):
        router.plug(OuterPlugin)  # type: ignore[arg-type]


def test_register_plugin_validation():
    class Nameless(BasePlugin):
        pass

    class Impostor(BasePlugin):
        plugin_code = "trace_outer"

    with pytest.raises(TypeError):
        Router.register_plugin(object)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="missing plugin_code"):
        Router.register_plugin(Nameless)
    with pytest.raises(ValueError, match="already registered"):
        Router.register_plugin(Impostor)
    # re-registering the same class is accepted
    Router.register_plugin(OuterPlugin)
    assert Router.available_plugins()["trace_outer"] is OuterPlugin


def test_register_plugin_with_explicit_name_replaces():
    class Alias(OuterPlugin):
        plugin_code = "trace_alias"

    Router.register_plugin(Alias, name="trace_alias")
    Router.register_plugin(InnerPlugin, name="trace_alias")
    assert Router.available_plugins()["trace_alias"] is InnerPlugin


def test_configure_targets():
    router = make_router().plug("logging")

    updates = router.configure(
        [
            {"target": "logging", "before": False},
            {"target": "logging/Page.*, Home.can_activate", "after": False},
        ]
    )

    assert updates == [
        {"target": "logging", "updated": ["_all_"]},
        {"target": "logging/Page.*, Home.can_activate", "updated": ["Page.*", "Home.can_activate"]},
    ]
    assert router.get_config("logging")["before"] is False
    assert router.get_config("logging", "Page.can_activate")["after"] is False
    assert "after" not in router.get_config("logging", "Other.activate")


def test_configure_errors():
    router = make_router().plug("logging")
    with pytest.raises(ValueError):
        router.configure(["logging"], before=False)
    with pytest.raises(ValueError):
        router.configure({"before": False})
    with pytest.raises(TypeError):
        router.configure(42)
    with pytest.raises(ValueError):
        router.configure("?", before=False)
    with pytest.raises(ValueError):
        router.configure("/Page.*", before=False)
    with pytest.raises(AttributeError):
        router.configure("trace_outer", before=False)
    with pytest.raises(ValueError):
        router.configure("logging")
    with pytest.raises(AttributeError):
        router.get_config("trace_outer")


def test_configure_describe():
    router = make_router().plug("logging")
    router.configure("logging/Page.*", before=False)

    info = router.configure("?")

    assert info["logging"]["description"] == "Logs transition hooks with timing"
    assert info["logging"]["config"]["enabled"] is True
    assert info["logging"]["overrides"] == {"Page.*": {"before": False}}


def test_plugins_attached_later_apply_to_next_transition():
    router = make_router(navigate_defaults={"force": True})
    router.start("/page")
    assert not any(e[0] == "trace_outer" for e in events)

    router.plug("trace_outer")
    router.go("/page")

    assert ("trace_outer", "start", "/page") in events
    assert ("trace_outer", "complete", "/page") in events

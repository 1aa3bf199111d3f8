"""Tests for route descriptors, hook markers and outlets."""

import pytest

from smartnav import Handler, Match, Route, RoutedView, Router, hook
from smartnav.core import CancelToken
from smartnav.core.route import expand_default_child
from smartnav.core.view import HOOK_ATTR_NAME, collect_hooks, find_hook


class Page(RoutedView):
    pass


class Child(RoutedView):
    pass


def test_cancel_token_is_one_way():
    token = CancelToken()
    assert token.cancelled is False
    token.cancel()
    token.cancel()
    assert token.cancelled is True
    assert "cancelled" in repr(token)


def test_route_merges_params_root_to_leaf():
    route = Route(
        "/a/1/b/2",
        [Match(Handler(Page), {"id": 1, "x": "a"}), Match(Handler(Child), {"id": 2})],
    )
    assert route.params == {"id": 2, "x": "a"}
    assert [m.handler.name for m in route.matched] == ["Page", "Child"]


def test_route_aborted_flag_only_moves_forward():
    route = Route("/a")
    assert route.aborted is False
    route.aborted = True
    assert route.aborted is True
    assert route.token.cancelled is True
    with pytest.raises(ValueError):
        route.aborted = False


def test_handler_validates_arguments():
    with pytest.raises(TypeError):
        Handler(object)
    with pytest.raises(TypeError):
        Handler(Page, default_child=Page)
    empty = Handler()
    assert empty.view is None
    assert Handler(Page, name="home").name == "home"


def test_expand_default_child_appends_one_level():
    grandchild = Handler(Child)
    child = Handler(Child, default_child=grandchild)
    parent = Handler(Page, default_child=child)

    chain = expand_default_child([Match(parent, {"id": 3})])

    assert [m.handler for m in chain] == [parent, child]
    assert chain[1].params == {}
    assert expand_default_child([]) == []
    plain = [Match(Handler(Page))]
    assert expand_default_child(plain) == plain


def test_hook_rejects_unknown_kind():
    with pytest.raises(ValueError, match="Unknown hook kind"):
        hook("before_enter")


def test_hook_markers_accumulate_and_respect_descriptors():
    class View(RoutedView):
        @hook("can_deactivate")
        @hook("deactivate")
        def both(self, transition):
            return True

        @hook("can_activate")
        @staticmethod
        def guard(transition):
            return True

    assert getattr(View.both, HOOK_ATTR_NAME) == ["deactivate", "can_deactivate"]
    assert collect_hooks(View) == {
        "deactivate": "both",
        "can_deactivate": "both",
        "can_activate": "guard",
    }
    assert find_hook(View, "can_activate") is View.guard


def test_subclass_marker_overrides_base():
    class Base(RoutedView):
        @hook("can_deactivate")
        def first(self, transition):
            return True

    class Derived(Base):
        @hook("can_deactivate")
        def second(self, transition):
            return False

    assert collect_hooks(Derived)["can_deactivate"] == "second"
    instance = Derived.__new__(Derived)
    assert find_hook(instance, "can_deactivate").__name__ == "second"
    assert find_hook(instance, "activate") is None


def test_can_activate_hook_must_be_class_level():
    class View(RoutedView):
        @hook("can_activate")
        def guard(self, transition):
            return True

    with pytest.raises(TypeError, match="classmethod or staticmethod"):
        find_hook(View, "can_activate")


def test_nested_outlets_register_deepest_first():
    class Shell(RoutedView):
        nested = True

    router = Router(lambda path: [Match(Handler(Shell)), Match(Handler(Page), {"p": 1})])
    router.start("/x")

    assert [view.depth for view in router.views] == [1, 0]
    assert router.root_view is router.views[-1]
    shell = router.root_view.component
    assert isinstance(shell, Shell)
    assert shell.child is router.views[0]
    assert router.views[0].parent is router.root_view
    assert router.views[0].component.params == {"p": 1}


def test_unbind_tears_down_subtree():
    class Shell(RoutedView):
        nested = True

    router = Router(lambda path: [Match(Handler(Shell)), Match(Handler(Shell))])
    router.start("/x")
    assert len(router.views) == 3

    router.root_view.unbind()

    assert router.views == []
    assert router.root_view.component is None


def test_handler_without_view_clears_outlet():
    router = Router(lambda path: [Match(Handler(Page))] if path == "/page" else [Match(Handler())])
    router.start("/page")
    assert isinstance(router.root_view.component, Page)

    router.go("/blank")

    assert router.root_view.component is None

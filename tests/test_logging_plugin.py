"""Tests for the logging plugin."""

import pytest
from pydantic import ValidationError

# Import to trigger plugin registration
import smartnav.plugins.logging  # noqa: F401
from smartnav import Handler, Match, RoutedView, Router, hook


class Guarded(RoutedView):
    @classmethod
    @hook("can_activate")
    def allow(cls, transition):
        return True

    @hook("can_deactivate")
    def leave(self, transition):
        return transition.to.path != "/locked"


class Plain(RoutedView):
    pass


TABLE = {
    "/g": [Match(Handler(Guarded))],
    "/p": [Match(Handler(Plain))],
    "/locked": [Match(Handler(Plain))],
}


class DummyLogger:
    def __init__(self):
        self.records = []

    def hasHandlers(self):  # noqa: N802 - logging.Logger API
        return True

    def info(self, message):
        self.records.append(message)


def make_router(**config):
    router = Router(lambda path: TABLE.get(path, [])).plug("logging", **config)
    logger = DummyLogger()
    router.logging._logger = logger  # type: ignore[attr-defined]
    return router, logger


def test_logging_plugin_reports_hooks_and_transitions():
    router, logger = make_router()

    router.start("/g")

    assert logger.records[0] == "transition - -> /g start"
    assert logger.records[1] == "Guarded.can_activate start"
    assert logger.records[2].startswith("Guarded.can_activate end (")
    assert logger.records[2].endswith(" ms)")
    assert logger.records[-1] == "transition - -> /g complete"


def test_logging_plugin_reports_aborts():
    router, logger = make_router()
    router.start("/g")
    logger.records.clear()

    router.go("/locked")

    assert "transition /g -> /locked aborted" in logger.records
    assert "transition /locked -> /g start" in logger.records
    assert logger.records[-1] == "transition /g -> /locked aborted"


def test_logging_plugin_wraps_global_before_hook():
    router, logger = make_router()
    router.before_each(lambda ctx: True)

    router.start("/p")

    assert "before_each start" in logger.records


def test_logging_plugin_selector_configuration():
    router, logger = make_router()
    result = router.configure("logging/Guarded.*", before=False)
    assert result == {"target": "logging/Guarded.*", "updated": ["Guarded.*"]}

    router.start("/g")

    assert "Guarded.can_activate start" not in logger.records
    assert any(msg.startswith("Guarded.can_activate end") for msg in logger.records)


def test_logging_plugin_transitions_flag():
    router, logger = make_router(transitions=False)

    router.start("/g")

    assert not any(msg.startswith("transition") for msg in logger.records)
    assert "Guarded.can_activate start" in logger.records


def test_logging_plugin_flags_string():
    router, logger = make_router()
    router.logging.configure(flags="before:off,after:off")  # type: ignore[attr-defined]

    router.start("/g")

    assert logger.records == ["transition - -> /g start", "transition - -> /g complete"]


def test_logging_plugin_can_be_disabled_per_hook():
    router, logger = make_router(transitions=False)
    router.set_plugin_enabled("Guarded.can_activate", "logging", False)

    router.start("/g")

    assert logger.records == []
    assert router.is_plugin_enabled("Guarded.can_activate", "logging") is False
    assert router.is_plugin_enabled("Guarded.can_deactivate", "logging") is True


def test_logging_plugin_disabled_globally():
    router, logger = make_router(enabled=False)

    router.start("/g")

    assert logger.records == []


def test_logging_plugin_print_sink(capsys):
    router, logger = make_router(print=True, before=False, after=False)

    router.start("/p")

    out = capsys.readouterr().out
    assert "transition - -> /p start" in out
    assert logger.records == []


def test_logging_plugin_falls_back_to_print_without_handlers(capsys):
    class SilentLogger(DummyLogger):
        def hasHandlers(self):  # noqa: N802
            return False

    router = Router(lambda path: TABLE.get(path, [])).plug("logging", before=False, after=False)
    silent = SilentLogger()
    router.logging._logger = silent  # type: ignore[attr-defined]

    router.start("/p")

    assert silent.records == []
    assert "transition - -> /p complete" in capsys.readouterr().out


def test_logging_plugin_silent_when_no_sink(capsys):
    router, logger = make_router(log=False)

    router.start("/g")

    assert logger.records == []
    assert capsys.readouterr().out == ""


def test_logging_plugin_rejects_invalid_values():
    router, _ = make_router()
    with pytest.raises(ValidationError):
        router.logging.configure(before="sometimes")  # type: ignore[attr-defined]


def test_logging_plugin_effective_config_merges_selectors():
    router, _ = make_router()
    router.configure("logging/Guarded.*", after=False)
    router.configure("logging/Guarded.can_activate", before=False)

    cfg = router.logging._effective_config("Guarded.can_activate")  # type: ignore[attr-defined]
    assert cfg["after"] is False
    assert cfg["before"] is False
    assert router.logging._effective_config("Plain.deactivate")["after"] is True  # type: ignore[attr-defined]

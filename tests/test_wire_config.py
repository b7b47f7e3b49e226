import logging
from pathlib import Path

import pytest

from actionhub.core.errors import WireConfigError
from actionhub.core.registry import ActionRegistry
from actionhub.handlers.logger import ActionLogger, log_action_items
from actionhub.wire_config import apply_config, build_from_yaml

EXAMPLE = Path(__file__).resolve().parents[1] / "configs" / "example_actions.yaml"


def test_example_config_matches_init_script():
    reg, results = build_from_yaml(EXAMPLE)
    assert results == [True, True]
    assert reg.category_of("ExampleAction") == "ScriptCategory"
    assert reg.category_of("ExampleAction2") == "ScriptCategory"
    assert reg.subscribers("ScriptCategory") == (log_action_items,)
    (debug_logger,) = reg.subscribers("Debug")
    assert isinstance(debug_logger, ActionLogger)


def test_build_into_existing_registry(tmp_path, caplog):
    cfg = tmp_path / "w.yaml"
    cfg.write_text(
        "assign:\n"
        "  Fire: Combat\n"
        "subscribe:\n"
        "  Combat:\n"
        "    - actionhub.handlers.logger:ActionLogger\n"
        "    - actionhub.handlers.logger:log_action_items\n"
        "post:\n"
        "  - action: Fire\n"
        "    data: [1, two, 3.0, false, null]\n"
        "  - action: Unknown\n",
        encoding="utf-8",
    )
    reg = ActionRegistry()
    with caplog.at_level(logging.INFO, logger="actionhub"):
        out, results = build_from_yaml(cfg, reg)
    assert out is reg
    assert results == [True, False]

    tracer, items = reg.subscribers("Combat")
    assert tracer.seen == 1
    assert items is log_action_items
    lines = [r.getMessage() for r in caplog.records if r.name == "actionhub.handlers.items"]
    assert [ln.split(": ", 1)[1] for ln in lines] == ["1", "two", "3", "false", "null"]


def test_dotted_reference_and_shared_instance():
    data = {
        "assign": {"a": "X", "b": "Y"},
        "subscribe": {
            "X": ["actionhub.handlers.logger.ActionLogger"],
            "Y": ["actionhub.handlers.logger.ActionLogger"],
        },
    }
    reg = ActionRegistry()
    assert apply_config(data, reg) == []
    assert reg.subscribers("X")[0] is reg.subscribers("Y")[0]


def test_empty_file_is_valid(tmp_path):
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("", encoding="utf-8")
    reg, results = build_from_yaml(cfg)
    assert len(reg) == 0 and results == []


@pytest.mark.parametrize("data", [
    ["not", "a", "mapping"],
    {"assign": ["a", "b"]},
    {"assign": {"": "C"}},
    {"subscribe": {"C": ["no_such_module_xyz:handler"]}},
    {"subscribe": {"C": ["actionhub.handlers.logger:missing"]}},
    {"subscribe": {"C": ["actionhub.core.ids:ROOT_NOT_THERE"]}},
    {"subscribe": {"C": ["nocolon"]}},
    {"subscribe": {"C": [{"x": 1}]}},
    {"subscribe": {"C": 5}},
    {"subscribe": {"C": ["actionhub.handlers.logger:ActionLogger", 7]}},
    {"post": [{"data": [1]}]},
    {"assign": {"a": "C"}, "post": [{"action": "a", "data": {"k": 1}}]},
])
def test_malformed_config_raises(data):
    with pytest.raises(WireConfigError):
        apply_config(data, ActionRegistry())


def test_non_callable_handler_rejected():
    with pytest.raises(WireConfigError):
        apply_config({"subscribe": {"C": ["actionhub.core.log:ROOT_LOGGER"]}}, ActionRegistry())


def test_invalid_yaml(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("assign: [unclosed\n", encoding="utf-8")
    with pytest.raises(WireConfigError):
        build_from_yaml(cfg)

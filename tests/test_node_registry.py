from __future__ import annotations

import pytest

from overseekflow.visual.models import FlowNode
from overseekflow.visual.registry import (
    DEFAULT_ACTION_GRADIENT,
    get_action_gradient,
    get_action_icon,
    get_action_label,
    get_node_presentation,
    get_palette_item,
    get_panel_header,
    get_trigger_icon,
    get_trigger_label,
    palette_items,
)


def _node(kind: str, config=None) -> FlowNode:
    data = {"label": "n"}
    if config is not None:
        data["config"] = config
    return FlowNode.model_validate({"id": "n1", "type": kind, "position": {"x": 0, "y": 0}, "data": data})


def test_unknown_action_type_falls_back_to_default_action() -> None:
    node = _node("action", {"actionType": "UNKNOWN_FUTURE_TYPE"})

    pres = get_node_presentation(node)

    assert pres.label == "Action"
    assert pres.icon == "mail"
    assert pres.gradient == DEFAULT_ACTION_GRADIENT


@pytest.mark.parametrize("config", [None, {}, {"triggerType": 7}, {"triggerType": "NEW_THING"}, "garbage"])
def test_trigger_lookups_never_fail(config) -> None:
    assert get_trigger_label(config) == "Trigger"
    assert get_trigger_icon(config) == "zap"


@pytest.mark.parametrize("config", [None, [], {"actionType": None}])
def test_action_lookups_never_fail(config) -> None:
    assert get_action_label(config) == "Action"
    assert get_action_icon(config) == "mail"
    assert get_action_gradient(config) == DEFAULT_ACTION_GRADIENT


def test_known_types_resolve() -> None:
    assert get_trigger_label({"triggerType": "ABANDONED_CART"}) == "Cart Abandoned"
    assert get_trigger_icon({"triggerType": "CUSTOMER_SIGNUP"}) == "user-plus"
    assert get_action_label({"actionType": "SEND_SMS"}) == "Send SMS"
    assert get_action_icon({"actionType": "WEBHOOK"}) == "link"
    assert "emerald" in get_action_gradient({"actionType": "GOAL"})
    assert "red" in get_action_gradient({"actionType": "JUMP"})


def test_condition_node_exposes_true_and_false_outputs() -> None:
    pres = get_node_presentation(_node("condition"))
    sources = [h.id for h in pres.handles if h.type == "source"]
    targets = [h for h in pres.handles if h.type == "target"]
    assert sources == ["true", "false"]
    assert len(targets) == 1


def test_trigger_node_has_only_an_output() -> None:
    pres = get_node_presentation(_node("trigger", {"triggerType": "ORDER_CREATED"}))
    assert [h.type for h in pres.handles] == ["source"]
    assert pres.label == "Order Created"
    assert pres.icon == "shopping-cart"


def test_delay_summary_defaults() -> None:
    assert get_node_presentation(_node("delay")).summary == "Wait 1 hours"
    assert get_node_presentation(_node("delay", {"duration": 3, "unit": "days"})).summary == "Wait 3 days"


def test_condition_summary_is_the_preview() -> None:
    pres = get_node_presentation(_node("condition", {"field": "order.total", "operator": "gt", "value": "100"}))
    assert pres.summary == 'If Order Total greater than "100" → YES / Otherwise → NO'


def test_action_summary_shows_subject() -> None:
    pres = get_node_presentation(_node("action", {"actionType": "SEND_EMAIL", "subject": "Hi!"}))
    assert pres.summary == "Hi!"


def test_panel_headers() -> None:
    assert get_panel_header("trigger").title == "Configure Trigger"
    assert get_panel_header("condition").color == "orange"
    fallback = get_panel_header("mystery")
    assert fallback.title == "Configure Node"
    assert fallback.icon is None


def test_palette_has_one_item_per_kind() -> None:
    kinds = {item.type.value for item in palette_items()}
    assert kinds == {"trigger", "action", "delay", "condition"}
    wait = get_palette_item("wait_1_hour")
    assert wait is not None and wait.config == {"duration": 1, "unit": "hours"}
    assert get_palette_item("nope") is None

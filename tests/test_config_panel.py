from __future__ import annotations

from typing import Any, Dict, List, Tuple

from overseekflow.visual.config_panel import DELETE_PROMPT, ConfigPanel
from overseekflow.visual.graph import FlowGraph


class Recorder:
    def __init__(self) -> None:
        self.updates: List[Tuple[str, Dict[str, Any]]] = []
        self.deletes: List[str] = []
        self.prompts: List[str] = []

    def on_update(self, node_id: str, data: Dict[str, Any]) -> None:
        self.updates.append((node_id, data))

    def on_delete(self, node_id: str) -> None:
        self.deletes.append(node_id)

    def confirm(self, answer: bool):
        def _ask(message: str) -> bool:
            self.prompts.append(message)
            return answer

        return _ask


DELAY_CONFIG = {
    "duration": 2,
    "unit": "days",
    "delayUntilDaysEnabled": True,
    "delayUntilDays": ["Mon", "Fri"],
    "useContactTimezone": True,
}


def _delay_graph():
    g = FlowGraph()
    node = g.add_node("delay", (0, 0), DELAY_CONFIG, label="Wait")
    return g, node


def test_updating_one_field_preserves_the_rest() -> None:
    g, node = _delay_graph()
    panel = ConfigPanel(node, on_update=g.update_node_data, on_delete=g.delete_node)

    panel.update_config("duration", 5)
    panel.commit()

    config = g.get_node(node.id).data.config
    assert config["duration"] == 5
    assert config["unit"] == "days"
    assert config["delayUntilDays"] == ["Mon", "Fri"]
    assert config["delayUntilDaysEnabled"] is True
    assert config["useContactTimezone"] is True
    assert g.get_node(node.id).data.label == "Wait"


def test_edits_stay_local_until_commit() -> None:
    g, node = _delay_graph()
    rec = Recorder()
    panel = ConfigPanel(node, on_update=rec.on_update, on_delete=rec.on_delete)

    panel.update_label("Wait a bit")
    panel.update_config("unit", "hours")

    assert rec.updates == []
    assert g.get_node(node.id).data.label == "Wait"
    assert g.get_node(node.id).data.config["unit"] == "days"

    data = panel.commit()
    assert rec.updates == [(node.id, data)]
    assert data["label"] == "Wait a bit"
    assert data["config"]["unit"] == "hours"


def test_delete_requires_confirmation() -> None:
    _, node = _delay_graph()
    rec = Recorder()

    refused = ConfigPanel(node, rec.on_update, rec.on_delete, confirm=rec.confirm(False))
    assert refused.delete() is False
    assert rec.deletes == []
    assert rec.prompts == [DELETE_PROMPT]

    accepted = ConfigPanel(node, rec.on_update, rec.on_delete, confirm=rec.confirm(True))
    assert accepted.delete() is True
    assert rec.deletes == [node.id]


def test_delete_without_a_prompt_is_refused() -> None:
    _, node = _delay_graph()
    rec = Recorder()
    assert ConfigPanel(node, rec.on_update, rec.on_delete).delete() is False
    assert rec.deletes == []


def test_toggle_day_and_summary() -> None:
    _, node = _delay_graph()
    panel = ConfigPanel(node, lambda *_: None, lambda *_: None)

    panel.toggle_day("Mon")
    panel.toggle_day("Wed")
    panel.update_config("delayUntilTimeEnabled", True)

    assert panel.config["delayUntilDays"] == ["Fri", "Wed"]
    assert panel.summary() == "Delay of 2 days (contact's timezone) until 09:00 on Fri, Wed."


def test_set_duration_accepts_any_positive_integer() -> None:
    _, node = _delay_graph()
    panel = ConfigPanel(node, lambda *_: None, lambda *_: None)
    panel.set_duration("100000")
    assert panel.config["duration"] == 100000
    panel.set_duration("abc")
    assert panel.config["duration"] == 1
    panel.set_duration(0)
    assert panel.config["duration"] == 1


def _keys(panel: ConfigPanel) -> List[str]:
    return [f.key for f in panel.fields()]


def test_action_fields_follow_action_type() -> None:
    g = FlowGraph()
    email = g.add_node("action", (0, 0), {"actionType": "SEND_EMAIL"})
    sms = g.add_node("action", (0, 0), {"actionType": "SEND_SMS"})
    webhook = g.add_node("action", (0, 0), {"actionType": "WEBHOOK"})
    unknown = g.add_node("action", (0, 0), {"actionType": "UNKNOWN_FUTURE_TYPE"})
    noop = lambda *_: None  # noqa: E731

    assert _keys(ConfigPanel(email, noop, noop)) == ["label", "actionType", "subject", "templateId"]
    assert _keys(ConfigPanel(sms, noop, noop)) == ["label", "actionType", "smsMessage", "isTransactional"]
    assert _keys(ConfigPanel(webhook, noop, noop)) == ["label", "actionType", "webhookUrl"]
    assert _keys(ConfigPanel(unknown, noop, noop)) == ["label", "actionType"]


def test_trigger_filter_fields_appear_when_enabled() -> None:
    g = FlowGraph()
    node = g.add_node("trigger", (0, 0), {"triggerType": "ORDER_CREATED"})
    panel = ConfigPanel(node, lambda *_: None, lambda *_: None)
    assert "filterValue" not in _keys(panel)
    panel.update_config("filterByValue", True)
    assert _keys(panel)[-2:] == ["filterOperator", "filterValue"]


def test_delay_fields_follow_mode() -> None:
    g = FlowGraph()
    node = g.add_node("delay", (0, 0), {"delayMode": "CUSTOM_FIELD"})
    panel = ConfigPanel(node, lambda *_: None, lambda *_: None)
    assert _keys(panel) == ["label", "delayMode", "customFieldKey"]
    panel.update_config("delayMode", "SPECIFIC_PERIOD")
    assert "duration" in _keys(panel)
    assert "delayUntilDays" not in _keys(panel)
    panel.update_config("delayUntilDaysEnabled", True)
    assert "delayUntilDays" in _keys(panel)


def test_condition_rows() -> None:
    g = FlowGraph()
    node = g.add_node("condition", (0, 0))
    panel = ConfigPanel(node, g.update_node_data, g.delete_node)

    panel.add_condition("order.total")
    panel.update_condition(0, "value", "100")
    panel.add_condition("customer.tags")
    panel.update_condition(1, "value", "vip")
    panel.set_match_type("any")

    assert panel.conditions == [
        {"field": "order.total", "operator": "gt", "value": "100"},
        {"field": "customer.tags", "operator": "contains", "value": "vip"},
    ]
    assert panel.preview() == (
        'If Order Total greater than "100" OR Has tag contains "vip" → YES / Otherwise → NO'
    )

    panel.remove_condition(0)
    panel.remove_condition(0)  # last row is kept
    assert len(panel.conditions) == 1

    panel.commit()
    assert g.get_node(node.id).data.config["matchType"] == "any"


def test_header_follows_node_kind() -> None:
    g = FlowGraph()
    node = g.add_node("condition", (0, 0))
    assert ConfigPanel(node, lambda *_: None, lambda *_: None).header.title == "Configure Condition"


def test_close_calls_callback() -> None:
    _, node = _delay_graph()
    closed = []
    ConfigPanel(node, lambda *_: None, lambda *_: None, on_close=lambda: closed.append(True)).close()
    assert closed == [True]

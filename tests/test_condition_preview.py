from __future__ import annotations

from overseekflow.visual.conditions import (
    conditions_from_config,
    group_catalogue,
    operator_label,
    operators_for_field,
    preview_for_config,
    render_condition_preview,
)
from overseekflow.visual.models import ConditionRule

RULES = [
    {"field": "order.total", "operator": "gt", "value": "100"},
    {"field": "customer.tags", "operator": "contains", "value": "vip"},
]


def test_match_all_joins_with_and() -> None:
    text = render_condition_preview(RULES, "all")

    assert text is not None
    assert "greater than" in text
    assert "contains" in text
    assert '"100" AND Has tag' in text
    assert text == 'If Order Total greater than "100" AND Has tag contains "vip" → YES / Otherwise → NO'


def test_match_any_joins_with_or() -> None:
    text = render_condition_preview(RULES, "any")
    assert " OR " in text
    assert " AND " not in text


def test_missing_match_type_defaults_to_and() -> None:
    assert " AND " in render_condition_preview(RULES, None)


def test_unknown_operator_and_field_are_shown_raw() -> None:
    text = render_condition_preview([{"field": "cart.weight", "operator": "approx", "value": "2kg"}])
    assert text == 'If cart.weight approx "2kg" → YES / Otherwise → NO'


def test_incomplete_rules_are_skipped() -> None:
    rules = [
        {"field": "", "operator": "eq", "value": "x"},
        {"field": "order.total", "operator": "gt", "value": ""},
        {"field": "customer.country", "operator": "eq", "value": "NZ"},
    ]
    assert render_condition_preview(rules) == 'If Country equals "NZ" → YES / Otherwise → NO'


def test_no_complete_rules_means_no_preview() -> None:
    assert render_condition_preview([]) is None
    assert render_condition_preview([{"field": "order.total", "operator": "gt"}]) is None


def test_zero_is_a_value() -> None:
    text = render_condition_preview([{"field": "order.itemCount", "operator": "eq", "value": 0}])
    assert text == 'If Order Item Count equals "0" → YES / Otherwise → NO'


def test_accepts_rule_models() -> None:
    rules = [ConditionRule(**r) for r in RULES]
    assert render_condition_preview(rules) == render_condition_preview(RULES)


def test_single_rule_config_and_multi_rule_config() -> None:
    single = {"field": "order.total", "operator": "gt", "value": "100"}
    assert conditions_from_config(single) == [single]
    multi = {"matchType": "any", "conditions": RULES}
    assert conditions_from_config(multi) == RULES
    assert " OR " in preview_for_config(multi)
    assert conditions_from_config(None) == []


def test_operator_tables() -> None:
    assert operator_label("not_contains") == "does not contain"
    assert operator_label("weird") == "weird"
    assert operators_for_field("customer.phone") == ["is_set", "not_set", "eq"]
    assert operators_for_field("unknown.field") == ["eq", "neq", "gt", "lt"]


def test_group_catalogue_is_json_friendly() -> None:
    groups = group_catalogue()
    woo = next(g for g in groups if g["id"] == "woocommerce")
    total = next(c for c in woo["conditions"] if c["field"] == "order.total")
    assert {"value": "gt", "label": "greater than"} in total["operators"]

"""Condition catalogue and the human-readable condition preview.

The preview is a display transform only: rules are never evaluated here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


OPERATOR_LABELS: Dict[str, str] = {
    "eq": "equals",
    "neq": "not equals",
    "gt": "greater than",
    "gte": "greater than or equal",
    "lt": "less than",
    "lte": "less than or equal",
    "contains": "contains",
    "not_contains": "does not contain",
    "is_set": "is set",
    "not_set": "is not set",
    "starts_with": "starts with",
    "between": "is between",
}

DEFAULT_OPERATORS: Tuple[str, ...] = ("eq", "neq", "gt", "lt")

_NUMERIC = ("gt", "gte", "lt", "lte", "eq")


@dataclass(frozen=True)
class ConditionField:
    field: str
    label: str
    operators: Tuple[str, ...]


@dataclass(frozen=True)
class ConditionGroup:
    id: str
    label: str
    icon: str
    conditions: Tuple[ConditionField, ...]


CONDITION_GROUPS: Tuple[ConditionGroup, ...] = (
    ConditionGroup("segments", "Segments", "📋", (
        ConditionField("segment.id", "Contact is in Segment", ("eq", "neq")),
        ConditionField("list.id", "Contact is in List", ("eq", "neq")),
    )),
    ConditionGroup("contact", "Contact Details", "👤", (
        ConditionField("customer.email", "Email address", ("contains", "not_contains", "eq", "neq")),
        ConditionField("customer.phone", "Phone number", ("is_set", "not_set", "eq")),
        ConditionField("customer.firstName", "First name", ("eq", "neq", "contains")),
        ConditionField("customer.lastName", "Last name", ("eq", "neq", "contains")),
        ConditionField("customer.tags", "Has tag", ("contains", "not_contains")),
    )),
    ConditionGroup("woocommerce", "WooCommerce", "🛒", (
        ConditionField("order.total", "Order Total", _NUMERIC),
        ConditionField("order.itemCount", "Order Item Count", _NUMERIC),
        ConditionField("order.productId", "Order contains product", ("eq", "neq")),
        ConditionField("order.categoryId", "Order contains category", ("eq", "neq")),
        ConditionField("customer.totalSpent", "Customer Lifetime Value", ("gt", "gte", "lt", "lte")),
        ConditionField("customer.ordersCount", "Customer Total Orders", _NUMERIC),
    )),
    ConditionGroup("user", "User", "🔐", (
        ConditionField("user.role", "User Role", ("eq", "neq")),
        ConditionField("user.isLoggedIn", "Is Logged In", ("eq",)),
        ConditionField("user.registeredDays", "Days since registration", ("gt", "lt", "eq")),
    )),
    ConditionGroup("geography", "Geography", "🌍", (
        ConditionField("customer.country", "Country", ("eq", "neq")),
        ConditionField("customer.state", "State/Province", ("eq", "neq")),
        ConditionField("customer.city", "City", ("eq", "neq", "contains")),
        ConditionField("customer.postcode", "Postcode", ("eq", "neq", "starts_with")),
    )),
    ConditionGroup("engagement", "Engagement", "📧", (
        ConditionField("email.opened", "Opened any email", ("eq",)),
        ConditionField("email.openedRecent", "Opened email in last X days", ("eq",)),
        ConditionField("email.clicked", "Clicked any link", ("eq",)),
        ConditionField("email.clickedRecent", "Clicked link in last X days", ("eq",)),
    )),
    ConditionGroup("datetime", "DateTime", "📅", (
        ConditionField("date.dayOfWeek", "Day of Week", ("eq", "neq")),
        ConditionField("date.hour", "Hour of Day", ("eq", "gt", "lt", "between")),
        ConditionField("date.month", "Month", ("eq", "neq")),
    )),
)

DEFAULT_GROUP = "woocommerce"

_FIELDS: Dict[str, ConditionField] = {
    c.field: c for g in CONDITION_GROUPS for c in g.conditions
}


def get_condition_group(group_id: str) -> Optional[ConditionGroup]:
    for group in CONDITION_GROUPS:
        if group.id == group_id:
            return group
    return None


def find_condition_field(field: str) -> Optional[ConditionField]:
    return _FIELDS.get(field)


def operator_label(operator: Any) -> str:
    op = "" if operator is None else str(operator)
    return OPERATOR_LABELS.get(op, op)


def field_label(field: Any) -> str:
    name = "" if field is None else str(field)
    known = _FIELDS.get(name)
    return known.label if known else name


def operators_for_field(field: str) -> List[str]:
    known = _FIELDS.get(field)
    return list(known.operators if known else DEFAULT_OPERATORS)


def conditions_from_config(config: Any) -> List[Dict[str, Any]]:
    """Return the rule list of a condition node config.

    Multi-condition configs carry `conditions`; single-rule nodes (recipes,
    older flows) carry `field`/`operator`/`value` directly.
    """
    if not isinstance(config, Mapping):
        return []
    rules = config.get("conditions")
    if isinstance(rules, list) and rules:
        return [dict(r) for r in rules if isinstance(r, Mapping)]
    if config.get("field"):
        return [{
            "field": config.get("field"),
            "operator": config.get("operator"),
            "value": config.get("value"),
        }]
    return []


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def _rule(rule: Any) -> Tuple[Any, Any, Any]:
    if isinstance(rule, Mapping):
        return rule.get("field"), rule.get("operator"), rule.get("value")
    return getattr(rule, "field", None), getattr(rule, "operator", None), getattr(rule, "value", None)


def describe_condition(rule: Any) -> str:
    field, operator, value = _rule(rule)
    return f'{field_label(field)} {operator_label(operator)} "{value}"'


def render_condition_preview(
    conditions: Iterable[Any], match_type: Optional[str] = "all"
) -> Optional[str]:
    """Render `If <a> AND <b> → YES / Otherwise → NO`.

    Rules missing a field or a value are left out; returns None when nothing
    is left. `match_type == "any"` joins with OR, anything else with AND.
    """
    complete = [r for r in conditions if _rule(r)[0] and _has_value(_rule(r)[2])]
    if not complete:
        return None
    mt = getattr(match_type, "value", match_type)
    joiner = " OR " if mt == "any" else " AND "
    body = joiner.join(describe_condition(r) for r in complete)
    return f"If {body} → YES / Otherwise → NO"


def preview_for_config(config: Any) -> Optional[str]:
    match_type = config.get("matchType") if isinstance(config, Mapping) else None
    return render_condition_preview(conditions_from_config(config), match_type)


def group_catalogue(groups: Sequence[ConditionGroup] = CONDITION_GROUPS) -> List[Dict[str, Any]]:
    """JSON-friendly view of the condition groups."""
    return [
        {
            "id": g.id,
            "label": g.label,
            "icon": g.icon,
            "conditions": [
                {
                    "field": c.field,
                    "label": c.label,
                    "operators": [{"value": op, "label": operator_label(op)} for op in c.operators],
                }
                for c in g.conditions
            ],
        }
        for g in groups
    ]

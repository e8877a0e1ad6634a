"""Config panel for the selected node.

The panel keeps an uncommitted copy of the node's data. Form inputs edit that
copy; `commit()` merges it over the node and hands it to `on_update`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .conditions import DEFAULT_GROUP, operators_for_field, preview_for_config
from .models import DelayMode, DelayUnit, FlowNode, NodeKind
from .registry import ACTION_TYPES, TRIGGER_TYPES, PanelHeader, get_panel_header

logger = logging.getLogger(__name__)

DAYS_OF_WEEK: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

DELETE_PROMPT = "Delete this node?"

EMAIL_TEMPLATES: Tuple[Tuple[str, str], ...] = (
    ("order_confirmation", "Order Confirmation"),
    ("thank_you", "Thank You"),
    ("review_request", "Review Request"),
    ("abandoned_cart", "Abandoned Cart Reminder"),
)

CUSTOM_DATE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("birthday", "Birthday"),
    ("subscription_renewal", "Subscription Renewal"),
    ("last_order_date", "Last Order Date"),
)

FILTER_OPERATORS: Tuple[Tuple[str, str], ...] = (
    ("gt", ">"), ("gte", "≥"), ("lt", "<"), ("lte", "≤"), ("eq", "="),
)

UpdateCallback = Callable[[str, Dict[str, Any]], Any]
DeleteCallback = Callable[[str], Any]
ConfirmCallback = Callable[[str], bool]


@dataclass(frozen=True)
class FieldSpec:
    """One input of the node form."""

    key: str
    label: str
    kind: str  # text|textarea|select|checkbox|number|number_unit|days|time|datetime|radio|conditions
    options: Tuple[Tuple[str, str], ...] = ()
    default: Any = None
    placeholder: Optional[str] = None
    help: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def _options(items) -> Tuple[Tuple[str, str], ...]:
    return tuple((i.value, i.label) for i in items)


def _empty_rule() -> Dict[str, Any]:
    return {"field": "", "operator": "", "value": ""}


def _deny(_message: str) -> bool:
    return False


class ConfigPanel:
    """Type-specific form bound to one node.

    Args:
        node: The selected node (snapshot; the panel never mutates it)
        on_update: Called as `on_update(node_id, merged_data)` on commit
        on_delete: Called as `on_delete(node_id)` after confirmation
        on_close: Optional close callback
        confirm: Interactive yes/no prompt. Without one, deletes are refused.
    """

    def __init__(
        self,
        node: FlowNode,
        on_update: UpdateCallback,
        on_delete: DeleteCallback,
        on_close: Optional[Callable[[], Any]] = None,
        confirm: Optional[ConfirmCallback] = None,
    ):
        self.node = node
        self._on_update = on_update
        self._on_delete = on_delete
        self._on_close = on_close
        self._confirm = confirm or _deny
        self.local_data: Dict[str, Any] = node.data.model_dump(mode="json", exclude_none=True)
        self.local_data.setdefault("config", {})

    # --- Buffer edits ----------------------------------------------------

    @property
    def config(self) -> Dict[str, Any]:
        return self.local_data["config"]

    @property
    def header(self) -> PanelHeader:
        return get_panel_header(self.node.type)

    def update_label(self, label: str) -> None:
        self.local_data["label"] = label

    def update_config(self, key: str, value: Any) -> None:
        self.local_data["config"] = {**self.config, key: value}

    def set_duration(self, raw: Any) -> None:
        # Mirrors the numeric input: anything that isn't a positive int is 1.
        try:
            value = int(raw)
        except (TypeError, ValueError):
            value = 1
        self.update_config("duration", value if value > 0 else 1)

    def toggle_day(self, day: str) -> None:
        current = list(self.config.get("delayUntilDays") or [])
        if day in current:
            current.remove(day)
        else:
            current.append(day)
        self.update_config("delayUntilDays", current)

    # --- Condition rows --------------------------------------------------

    @property
    def conditions(self) -> List[Dict[str, Any]]:
        rules = self.config.get("conditions")
        if isinstance(rules, list) and rules:
            return [dict(r) for r in rules]
        return [_empty_rule()]

    def _set_conditions(self, rules: List[Dict[str, Any]]) -> None:
        self.update_config("conditions", rules)

    def set_match_type(self, match_type: str) -> None:
        self.update_config("matchType", "any" if match_type == "any" else "all")

    def set_group(self, group_id: str) -> None:
        self.update_config("group", group_id)

    def add_condition(self, field_name: Optional[str] = None) -> None:
        """Add a rule; picking a field fills the trailing blank row first."""
        rules = self.conditions
        if field_name is None:
            rules.append(_empty_rule())
        else:
            operator = operators_for_field(field_name)[0]
            if rules and not rules[-1].get("field"):
                rules[-1] = {**rules[-1], "field": field_name, "operator": operator}
            else:
                rules.append({"field": field_name, "operator": operator, "value": ""})
        self._set_conditions(rules)

    def update_condition(self, index: int, key: str, value: Any) -> None:
        rules = self.conditions
        rules[index] = {**rules[index], key: value}
        self._set_conditions(rules)

    def remove_condition(self, index: int) -> None:
        rules = self.conditions
        if len(rules) <= 1:
            return
        del rules[index]
        self._set_conditions(rules)

    def operators_for_field(self, field_name: str) -> List[str]:
        return operators_for_field(field_name)

    def preview(self) -> Optional[str]:
        return preview_for_config(self.config)

    # --- Form layout -----------------------------------------------------

    def fields(self) -> List[FieldSpec]:
        """Inputs for the node, driven by its kind and nested sub-type."""
        specs = [FieldSpec("label", "Label", "text", default="")]
        kind = self.node.type
        if kind is NodeKind.TRIGGER:
            specs.extend(self._trigger_fields())
        elif kind is NodeKind.ACTION:
            specs.extend(self._action_fields())
        elif kind is NodeKind.DELAY:
            specs.extend(self._delay_fields())
        elif kind is NodeKind.CONDITION:
            specs.extend(self._condition_fields())
        return specs

    def _trigger_fields(self) -> List[FieldSpec]:
        specs = [
            FieldSpec("triggerType", "Trigger Type", "select", _options(TRIGGER_TYPES), "ORDER_CREATED"),
            FieldSpec("filterByValue", "Filter by order value", "checkbox", default=False),
        ]
        if self.config.get("filterByValue"):
            specs += [
                FieldSpec("filterOperator", "Order total", "select", FILTER_OPERATORS, "gt"),
                FieldSpec("filterValue", "Amount", "number", placeholder="100"),
            ]
        return specs

    def _action_fields(self) -> List[FieldSpec]:
        action_type = self.config.get("actionType")
        specs = [FieldSpec("actionType", "Action Type", "select", _options(ACTION_TYPES), "SEND_EMAIL")]
        if action_type == "SEND_EMAIL":
            specs += [
                FieldSpec("subject", "Subject Line", "text", placeholder="Thanks for your order!"),
                FieldSpec("templateId", "Email Template", "select", EMAIL_TEMPLATES, ""),
            ]
        elif action_type == "SEND_SMS":
            specs += [
                FieldSpec(
                    "smsMessage", "SMS Message", "textarea",
                    placeholder="Hi {{customer.firstName}}, thanks for your order!",
                    help="Use {{variable}} for personalization",
                ),
                FieldSpec("isTransactional", "Mark as transactional", "checkbox", default=False),
            ]
        elif action_type == "ADD_TAG":
            specs.append(FieldSpec(
                "tagName", "Tag Name", "text", placeholder="VIP Customer",
                help="This tag will be added to the contact",
            ))
        elif action_type == "REMOVE_TAG":
            specs.append(FieldSpec(
                "tagName", "Tag Name", "text", placeholder="Abandoned Cart",
                help="This tag will be removed from the contact",
            ))
        elif action_type == "WEBHOOK":
            specs.append(FieldSpec("webhookUrl", "Webhook URL", "text", placeholder="https://example.com/webhook"))
        return specs

    def _delay_fields(self) -> List[FieldSpec]:
        mode = self.config.get("delayMode") or DelayMode.SPECIFIC_PERIOD.value
        specs = [
            FieldSpec(
                "delayMode", "Delay", "radio",
                (
                    (DelayMode.SPECIFIC_PERIOD.value, "Delay for a specific period"),
                    (DelayMode.SPECIFIC_DATE.value, "Delay until a specific date and time"),
                    (DelayMode.CUSTOM_FIELD.value, "Delay until a custom field date"),
                ),
                DelayMode.SPECIFIC_PERIOD.value,
            )
        ]
        if mode == DelayMode.SPECIFIC_PERIOD.value:
            specs += [
                FieldSpec(
                    "duration", "Wait", "number_unit",
                    tuple((u.value, u.value.capitalize()) for u in DelayUnit), 1,
                    extra={"unit_key": "unit", "unit_default": DelayUnit.HOURS.value, "min": 1},
                ),
                FieldSpec("useContactTimezone", "Use contact's timezone", "checkbox", default=False),
                FieldSpec("delayUntilTimeEnabled", "Delay until a specific time of day", "checkbox", default=False),
            ]
            if self.config.get("delayUntilTimeEnabled"):
                specs.append(FieldSpec("delayUntilTime", "Time of day", "time", default="09:00"))
            specs.append(FieldSpec(
                "delayUntilDaysEnabled", "Delay until a specific day(s) of the week", "checkbox", default=False,
            ))
            if self.config.get("delayUntilDaysEnabled"):
                specs.append(FieldSpec("delayUntilDays", "Days", "days", tuple((d, d) for d in DAYS_OF_WEEK), []))
            specs.append(FieldSpec("jumpIfPassed", "Jump to next step if time has passed", "checkbox", default=False))
        elif mode == DelayMode.SPECIFIC_DATE.value:
            specs.append(FieldSpec("specificDate", "Date and time", "datetime", default=""))
        elif mode == DelayMode.CUSTOM_FIELD.value:
            specs.append(FieldSpec("customFieldKey", "Date field", "select", CUSTOM_DATE_FIELDS, ""))
        return specs

    def _condition_fields(self) -> List[FieldSpec]:
        return [
            FieldSpec("matchType", "Match", "select", (("all", "Match ALL (AND)"), ("any", "Match ANY (OR)")), "all"),
            FieldSpec("group", "Category", "select", default=DEFAULT_GROUP),
            FieldSpec("conditions", "Conditions", "conditions", default=[_empty_rule()]),
        ]

    def summary(self) -> Optional[str]:
        """Delay summary pill text, e.g. "Delay of 2 days until 09:00 on Mon, Fri."."""
        if self.node.type is not NodeKind.DELAY:
            return None
        cfg = self.config
        text = f"Delay of {cfg.get('duration') or 1} {cfg.get('unit') or DelayUnit.HOURS.value}"
        if cfg.get("useContactTimezone"):
            text += " (contact's timezone)"
        if cfg.get("delayUntilTimeEnabled"):
            text += f" until {cfg.get('delayUntilTime') or '09:00'}"
        days = cfg.get("delayUntilDays") or []
        if cfg.get("delayUntilDaysEnabled") and days:
            text += f" on {', '.join(days)}"
        return text + "."

    # --- Commit / delete -------------------------------------------------

    def merged_data(self) -> Dict[str, Any]:
        """Buffer merged over the node's current data, config merged key-wise."""
        base = self.node.data.model_dump(mode="json", exclude_none=True)
        merged = {**base, **copy.deepcopy(self.local_data)}
        merged["config"] = {**(base.get("config") or {}), **copy.deepcopy(self.config)}
        return merged

    def commit(self) -> Dict[str, Any]:
        data = self.merged_data()
        self._on_update(self.node.id, data)
        logger.debug("Committed config for node %s", self.node.id)
        return data

    def delete(self) -> bool:
        """Delete the node after the user confirms; returns whether it happened."""
        if not self._confirm(DELETE_PROMPT):
            return False
        self._on_delete(self.node.id)
        return True

    def close(self) -> None:
        if self._on_close is not None:
            self._on_close()

"""Node type registry: presentation metadata for flow nodes.

Every lookup here tolerates missing or malformed config and falls back to a
default icon/label, so a flow saved by a newer client still renders.
Icons are lucide icon names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .conditions import conditions_from_config, render_condition_preview
from .models import FALSE_HANDLE, TRUE_HANDLE, FlowNode, NodeKind


@dataclass(frozen=True)
class NodeTypeOption:
    value: str
    label: str
    group: str = ""


TRIGGER_TYPES: Tuple[NodeTypeOption, ...] = (
    NodeTypeOption("ORDER_CREATED", "Order Created", "WooCommerce"),
    NodeTypeOption("ORDER_COMPLETED", "Order Completed", "WooCommerce"),
    NodeTypeOption("ABANDONED_CART", "Cart Abandoned", "WooCommerce"),
    NodeTypeOption("CART_VIEWED", "Cart Viewed", "WooCommerce"),
    NodeTypeOption("REVIEW_LEFT", "Review Left", "WooCommerce"),
    NodeTypeOption("CUSTOMER_SIGNUP", "Customer Signup", "Customer"),
    NodeTypeOption("TAG_ADDED", "Tag Added", "Customer"),
    NodeTypeOption("TAG_REMOVED", "Tag Removed", "Customer"),
    NodeTypeOption("MANUAL", "Manual Entry", "Customer"),
    NodeTypeOption("SUBSCRIPTION_CREATED", "Subscription Created", "Subscriptions"),
    NodeTypeOption("SUBSCRIPTION_CANCELLED", "Subscription Cancelled", "Subscriptions"),
    NodeTypeOption("EMAIL_OPENED", "Email Opened", "Email Engagement"),
    NodeTypeOption("LINK_CLICKED", "Link Clicked", "Email Engagement"),
)

# Selectable in the action form; GOAL/JUMP/EXIT come from recipes and the
# step menu but still have presentation entries below.
ACTION_TYPES: Tuple[NodeTypeOption, ...] = (
    NodeTypeOption("SEND_EMAIL", "Send Email"),
    NodeTypeOption("SEND_SMS", "Send SMS"),
    NodeTypeOption("ADD_TAG", "Add Tag"),
    NodeTypeOption("REMOVE_TAG", "Remove Tag"),
    NodeTypeOption("WEBHOOK", "Webhook"),
)

_TRIGGER_ICONS: Dict[str, str] = {
    "ORDER_CREATED": "shopping-cart",
    "ORDER_COMPLETED": "check-circle",
    "REVIEW_LEFT": "star",
    "ABANDONED_CART": "shopping-cart",
    "CART_VIEWED": "eye",
    "CUSTOMER_SIGNUP": "user-plus",
    "SUBSCRIPTION_CREATED": "credit-card",
    "SUBSCRIPTION_CANCELLED": "x-circle",
    "TAG_ADDED": "tag",
    "TAG_REMOVED": "tag",
    "EMAIL_OPENED": "mail",
    "LINK_CLICKED": "mouse-pointer",
    "MANUAL": "user",
}
_TRIGGER_LABELS: Dict[str, str] = {t.value: t.label for t in TRIGGER_TYPES}

_ACTION_ICONS: Dict[str, str] = {
    "SEND_EMAIL": "mail",
    "SEND_SMS": "message-square",
    "ADD_TAG": "tag",
    "REMOVE_TAG": "tag",
    "WEBHOOK": "link",
    "GOAL": "target",
    "JUMP": "arrow-up-down",
    "EXIT": "log-out",
}
_ACTION_LABELS: Dict[str, str] = {
    "SEND_EMAIL": "Send Email",
    "SEND_SMS": "Send SMS",
    "ADD_TAG": "Add Tag",
    "REMOVE_TAG": "Remove Tag",
    "WEBHOOK": "Webhook",
    "GOAL": "Goal",
    "JUMP": "Jump",
    "EXIT": "Exit",
}
_ACTION_GRADIENTS: Dict[str, str] = {
    "GOAL": "bg-linear-to-br from-emerald-500 to-emerald-600",
    "JUMP": "bg-linear-to-br from-red-500 to-red-600",
    "EXIT": "bg-linear-to-br from-gray-500 to-gray-600",
}

DEFAULT_TRIGGER_ICON = "zap"
DEFAULT_TRIGGER_LABEL = "Trigger"
DEFAULT_ACTION_ICON = "mail"
DEFAULT_ACTION_LABEL = "Action"
DEFAULT_ACTION_GRADIENT = "bg-linear-to-br from-green-500 to-green-600"


def _discriminant(config: Any, key: str) -> Optional[str]:
    if not isinstance(config, Mapping):
        return None
    value = config.get(key)
    return value if isinstance(value, str) else None


def get_trigger_icon(config: Any) -> str:
    return _TRIGGER_ICONS.get(_discriminant(config, "triggerType") or "", DEFAULT_TRIGGER_ICON)


def get_trigger_label(config: Any) -> str:
    """Human-readable trigger name ("Trigger" when unknown)."""
    return _TRIGGER_LABELS.get(_discriminant(config, "triggerType") or "", DEFAULT_TRIGGER_LABEL)


def get_action_icon(config: Any) -> str:
    return _ACTION_ICONS.get(_discriminant(config, "actionType") or "", DEFAULT_ACTION_ICON)


def get_action_label(config: Any) -> str:
    """Human-readable action name ("Action" when unknown)."""
    return _ACTION_LABELS.get(_discriminant(config, "actionType") or "", DEFAULT_ACTION_LABEL)


def get_action_gradient(config: Any) -> str:
    return _ACTION_GRADIENTS.get(_discriminant(config, "actionType") or "", DEFAULT_ACTION_GRADIENT)


@dataclass(frozen=True)
class Handle:
    type: str  # "source" | "target"
    id: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class NodePresentation:
    kind: str
    title: str
    icon: str
    label: str
    border_color: str
    bg_color: str
    gradient: str
    handles: Tuple[Handle, ...]
    summary: Optional[str] = None


@dataclass(frozen=True)
class PanelHeader:
    title: str
    icon: Optional[str]
    color: str


@dataclass(frozen=True)
class _KindStyle:
    title: str
    icon: str
    border_color: str
    bg_color: str
    gradient: str
    panel_color: str


_KIND_STYLES: Dict[NodeKind, _KindStyle] = {
    NodeKind.TRIGGER: _KindStyle(
        "Trigger", "zap", "border-blue-400", "bg-blue-50",
        "bg-linear-to-br from-blue-500 to-blue-600", "blue",
    ),
    NodeKind.ACTION: _KindStyle(
        "Action", "mail", "border-green-400", "bg-green-50", DEFAULT_ACTION_GRADIENT, "green",
    ),
    NodeKind.DELAY: _KindStyle(
        "Delay", "clock", "border-yellow-400", "bg-yellow-50",
        "bg-linear-to-br from-yellow-500 to-yellow-600", "yellow",
    ),
    NodeKind.CONDITION: _KindStyle(
        "Condition", "split", "border-orange-400", "bg-orange-50",
        "bg-linear-to-br from-orange-500 to-orange-600", "orange",
    ),
}

_SOURCE = Handle("source")
_TARGET = Handle("target")
_HANDLES: Dict[NodeKind, Tuple[Handle, ...]] = {
    # Triggers start the flow, so they only have an output.
    NodeKind.TRIGGER: (_SOURCE,),
    NodeKind.ACTION: (_TARGET, _SOURCE),
    NodeKind.DELAY: (_TARGET, _SOURCE),
    NodeKind.CONDITION: (
        _TARGET,
        Handle("source", TRUE_HANDLE, "YES"),
        Handle("source", FALSE_HANDLE, "NO"),
    ),
}


def node_handles(kind: NodeKind) -> Tuple[Handle, ...]:
    return _HANDLES[NodeKind(kind)]


def _delay_summary(config: Any) -> str:
    cfg = config if isinstance(config, Mapping) else {}
    return f"Wait {cfg.get('duration') or 1} {cfg.get('unit') or 'hours'}"


def get_node_presentation(node: FlowNode) -> NodePresentation:
    """Resolve icon/label/colors for a node on the canvas."""
    kind = node.type
    style = _KIND_STYLES[kind]
    config = node.data.config
    icon, label, gradient, summary = style.icon, style.title, style.gradient, None

    if kind is NodeKind.TRIGGER:
        icon, label = get_trigger_icon(config), get_trigger_label(config)
    elif kind is NodeKind.ACTION:
        icon = get_action_icon(config)
        label = get_action_label(config)
        gradient = get_action_gradient(config)
        subject = config.get("subject") if isinstance(config, Mapping) else None
        summary = subject if isinstance(subject, str) and subject else None
    elif kind is NodeKind.DELAY:
        summary = _delay_summary(config)
    elif kind is NodeKind.CONDITION:
        summary = render_condition_preview(
            conditions_from_config(config),
            config.get("matchType") if isinstance(config, Mapping) else None,
        )

    return NodePresentation(
        kind=kind.value,
        title=style.title,
        icon=icon,
        label=label,
        border_color=style.border_color,
        bg_color=style.bg_color,
        gradient=gradient,
        handles=_HANDLES[kind],
        summary=summary,
    )


def get_panel_header(kind: Any) -> PanelHeader:
    try:
        style = _KIND_STYLES[NodeKind(kind)]
    except ValueError:
        return PanelHeader(title="Configure Node", icon=None, color="gray")
    return PanelHeader(title=f"Configure {style.title}", icon=style.icon, color=style.panel_color)


@dataclass(frozen=True)
class PaletteItem:
    """A toolbox entry that can be dropped on the canvas."""

    id: str
    type: NodeKind
    label: str
    config: Dict[str, Any] = field(default_factory=dict)


_PALETTE: Tuple[PaletteItem, ...] = (
    PaletteItem("trigger", NodeKind.TRIGGER, "Order Created", {"triggerType": "ORDER_CREATED"}),
    PaletteItem("send_email", NodeKind.ACTION, "Send Email", {"actionType": "SEND_EMAIL"}),
    PaletteItem("wait_1_hour", NodeKind.DELAY, "Wait 1 Hour", {"duration": 1, "unit": "hours"}),
    PaletteItem("condition", NodeKind.CONDITION, "Check Condition"),
)


def palette_items() -> List[PaletteItem]:
    return list(_PALETTE)


def get_palette_item(item_id: str) -> Optional[PaletteItem]:
    for item in _PALETTE:
        if item.id == item_id:
            return item
    return None

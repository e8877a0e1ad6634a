"""Pre-built automation recipes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .models import FlowDefinition, FlowEdge, FlowNode, NodeData, Position

AUTOMATION_CATEGORIES: Tuple[str, ...] = (
    "All", "Onboarding", "Sales", "Engagement", "Segmentation", "Retention",
)


@dataclass(frozen=True)
class RecipeNode:
    id: str
    type: str
    label: str
    config: Dict[str, Any]


@dataclass(frozen=True)
class RecipeEdge:
    source: str
    target: str
    sourceHandle: Optional[str] = None


@dataclass(frozen=True)
class AutomationRecipe:
    id: str
    name: str
    description: str
    icon: str
    category: str
    nodes: Tuple[RecipeNode, ...]
    edges: Tuple[RecipeEdge, ...]


def _email(node_id: str, label: str, subject: str) -> RecipeNode:
    return RecipeNode(node_id, "action", label, {"actionType": "SEND_EMAIL", "subject": subject})


def _wait(node_id: str, label: str, duration: int, unit: str) -> RecipeNode:
    return RecipeNode(node_id, "delay", label, {"duration": duration, "unit": unit})


def _trigger(label: str, trigger_type: str) -> RecipeNode:
    return RecipeNode("trigger", "trigger", label, {"triggerType": trigger_type})


def _chain(*ids: str) -> Tuple[RecipeEdge, ...]:
    return tuple(RecipeEdge(a, b) for a, b in zip(ids, ids[1:]))


AUTOMATION_RECIPES: Tuple[AutomationRecipe, ...] = (
    AutomationRecipe(
        "welcome_series", "Welcome Email Series",
        "Send a welcome email to new customers with a follow-up after 3 days",
        "mail", "Onboarding",
        (
            _trigger("Customer Signup", "CUSTOMER_SIGNUP"),
            _email("email1", "Welcome Email", "Welcome to our store!"),
            _wait("delay1", "Wait 3 Days", 3, "days"),
            _email("email2", "Follow-up Email", "Need help getting started?"),
        ),
        _chain("trigger", "email1", "delay1", "email2"),
    ),
    AutomationRecipe(
        "abandoned_cart", "Abandoned Cart Recovery",
        "Recover abandoned carts with timed email reminders",
        "shopping-cart", "Sales",
        (
            _trigger("Cart Abandoned", "ABANDONED_CART"),
            _wait("delay1", "Wait 1 Hour", 1, "hours"),
            _email("email1", "Reminder Email", "You left something behind..."),
            _wait("delay2", "Wait 24 Hours", 24, "hours"),
            _email("email2", "Last Chance Email", "Your cart is about to expire!"),
        ),
        _chain("trigger", "delay1", "email1", "delay2", "email2"),
    ),
    AutomationRecipe(
        "review_request", "Review Request",
        "Ask for a review after order completion",
        "star", "Engagement",
        (
            _trigger("Order Completed", "ORDER_COMPLETED"),
            _wait("delay1", "Wait 7 Days", 7, "days"),
            _email("email1", "Review Request", "How was your order?"),
        ),
        _chain("trigger", "delay1", "email1"),
    ),
    AutomationRecipe(
        "vip_tagging", "VIP Customer Tagging",
        "Automatically tag high-value customers based on order total",
        "tag", "Segmentation",
        (
            _trigger("Order Completed", "ORDER_COMPLETED"),
            RecipeNode("condition", "condition", "Order > $100?",
                       {"field": "order.total", "operator": "gt", "value": "100"}),
            RecipeNode("tag", "action", "Add VIP Tag", {"actionType": "ADD_TAG", "tagName": "VIP Customer"}),
        ),
        (RecipeEdge("trigger", "condition"), RecipeEdge("condition", "tag", "true")),
    ),
    AutomationRecipe(
        "birthday_offer", "Birthday Special Offer",
        "Send a special discount on customer birthdays",
        "gift", "Engagement",
        (
            _trigger("Birthday Reminder", "BIRTHDAY_REMINDER"),
            _email("email1", "Birthday Email", "Happy Birthday! Here's a gift for you 🎂"),
        ),
        _chain("trigger", "email1"),
    ),
    AutomationRecipe(
        "win_back", "Win-Back Campaign",
        "Re-engage customers who haven't purchased in 90 days",
        "heart", "Retention",
        (
            _trigger("Manual Entry", "MANUAL"),
            _email("email1", "We Miss You", "We miss you! Come back for 20% off"),
            _wait("delay1", "Wait 7 Days", 7, "days"),
            _email("email2", "Last Chance", "Last chance: Your exclusive discount expires soon"),
        ),
        _chain("trigger", "email1", "delay1", "email2"),
    ),
)


def list_recipes(category: Optional[str] = None) -> List[AutomationRecipe]:
    if not category or category == "All":
        return list(AUTOMATION_RECIPES)
    return [r for r in AUTOMATION_RECIPES if r.category == category]


def get_recipe(recipe_id: str) -> Optional[AutomationRecipe]:
    for recipe in AUTOMATION_RECIPES:
        if recipe.id == recipe_id:
            return recipe
    return None


def instantiate_recipe(
    recipe: AutomationRecipe,
    origin: Tuple[float, float] = (250.0, 50.0),
    spacing: float = 150.0,
) -> FlowDefinition:
    """Lay a recipe out top to bottom and return it as a flow definition.

    Nodes reached through a `false` branch are shifted right so both
    branches of a condition stay readable.
    """
    x0, y0 = origin
    false_targets = {e.target for e in recipe.edges if e.sourceHandle == "false"}
    nodes = [
        FlowNode(
            id=n.id,
            type=n.type,
            position=Position(x=x0 + (spacing * 2 if n.id in false_targets else 0.0), y=y0 + i * spacing),
            data=NodeData(label=n.label, config=dict(n.config)),
        )
        for i, n in enumerate(recipe.nodes)
    ]
    edges = [
        FlowEdge(id=f"e-{e.source}-{e.target}", source=e.source, target=e.target, sourceHandle=e.sourceHandle)
        for e in recipe.edges
    ]
    return FlowDefinition(nodes=nodes, edges=edges)


def recipe_summary(recipe: AutomationRecipe) -> Dict[str, Any]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "icon": recipe.icon,
        "category": recipe.category,
        "steps": len(recipe.nodes),
    }

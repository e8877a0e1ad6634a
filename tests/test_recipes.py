from __future__ import annotations

from overseekflow.visual.recipes import get_recipe, instantiate_recipe, list_recipes, recipe_summary


def test_categories_filter() -> None:
    assert len(list_recipes()) == 6
    assert len(list_recipes("All")) == 6
    assert [r.id for r in list_recipes("Engagement")] == ["review_request", "birthday_offer"]
    assert list_recipes("Nope") == []


def test_instantiate_lays_out_vertically() -> None:
    flow = instantiate_recipe(get_recipe("abandoned_cart"), origin=(0, 0), spacing=100)
    assert [n.position.y for n in flow.nodes] == [0, 100, 200, 300, 400]
    assert all(n.position.x == 0 for n in flow.nodes)
    assert [(e.source, e.target) for e in flow.edges][0] == ("trigger", "delay1")
    assert len({e.id for e in flow.edges}) == len(flow.edges)


def test_vip_recipe_keeps_true_branch() -> None:
    flow = instantiate_recipe(get_recipe("vip_tagging"))
    branch = [e for e in flow.edges if e.source == "condition"]
    assert [(e.target, e.sourceHandle) for e in branch] == [("tag", "true")]
    assert flow.nodes[1].data.config == {"field": "order.total", "operator": "gt", "value": "100"}


def test_instances_do_not_share_config() -> None:
    first = instantiate_recipe(get_recipe("welcome_series"))
    first.nodes[1].data.config["subject"] = "changed"
    second = instantiate_recipe(get_recipe("welcome_series"))
    assert second.nodes[1].data.config["subject"] == "Welcome to our store!"


def test_summary() -> None:
    summary = recipe_summary(get_recipe("win_back"))
    assert summary["steps"] == 4
    assert summary["category"] == "Retention"
    assert get_recipe("missing") is None

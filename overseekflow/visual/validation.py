"""Best-effort flow checks run before a flow is saved or activated.

The editor itself is permissive (cycles, parallel edges and long delays are
all allowed while editing). These checks report what the automation engine
would trip over, as a list of issues rather than exceptions.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import BRANCH_HANDLES, FlowDefinition, NodeKind

ERROR = "error"
WARNING = "warning"

# Longest delay accepted without a warning, per unit.
MAX_DELAY_DURATION: Dict[str, int] = {
    "minutes": 60 * 24 * 30,
    "hours": 24 * 365,
    "days": 365,
    "weeks": 52,
    "months": 12,
}


@dataclass(frozen=True)
class FlowIssue:
    level: str
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"level": self.level, "message": self.message, "node_id": self.node_id, "edge_id": self.edge_id}


def _check_triggers(flow: FlowDefinition) -> List[FlowIssue]:
    triggers = [n for n in flow.nodes if n.type is NodeKind.TRIGGER]
    if not triggers:
        return [FlowIssue(WARNING, "Flow has no trigger node; drag a trigger to start the flow.")]
    if len(triggers) > 1:
        return [
            FlowIssue(WARNING, f"Flow has {len(triggers)} trigger nodes; only one entry point is expected.", t.id)
            for t in triggers[1:]
        ]
    return []


def _check_condition_branches(flow: FlowDefinition) -> List[FlowIssue]:
    issues: List[FlowIssue] = []
    for node in flow.nodes:
        if node.type is not NodeKind.CONDITION:
            continue
        out = [e for e in flow.edges if e.source == node.id]
        for edge in out:
            if edge.sourceHandle not in BRANCH_HANDLES:
                issues.append(FlowIssue(
                    WARNING,
                    f"Edge '{edge.id}' leaves condition '{node.id}' without a true/false branch.",
                    node.id, edge.id,
                ))
        counts = Counter(e.sourceHandle for e in out if e.sourceHandle in BRANCH_HANDLES)
        for handle, count in sorted(counts.items()):
            if count > 1:
                issues.append(FlowIssue(
                    WARNING,
                    f"Condition '{node.id}' has {count} edges on its '{handle}' branch.",
                    node.id,
                ))
    return issues


def _check_delays(flow: FlowDefinition) -> List[FlowIssue]:
    issues: List[FlowIssue] = []
    for node in flow.nodes:
        if node.type is not NodeKind.DELAY:
            continue
        config = node.data.config
        unit = config.get("unit") or "hours"
        try:
            raw = config.get("duration", 1)
            duration = 1 if raw is None else int(raw)
        except (TypeError, ValueError):
            issues.append(FlowIssue(ERROR, f"Delay '{node.id}' has a non-numeric duration.", node.id))
            continue
        if duration < 1:
            issues.append(FlowIssue(ERROR, f"Delay '{node.id}' must wait at least 1 {unit}.", node.id))
        limit = MAX_DELAY_DURATION.get(unit)
        if limit is not None and duration > limit:
            issues.append(FlowIssue(
                WARNING, f"Delay '{node.id}' waits {duration} {unit} (more than {limit}).", node.id,
            ))
    return issues


def validate_flow(flow: FlowDefinition) -> List[FlowIssue]:
    """Return every issue found in `flow` (empty when clean)."""
    issues: List[FlowIssue] = []

    ids = Counter(n.id for n in flow.nodes)
    for node_id, count in ids.items():
        if count > 1:
            issues.append(FlowIssue(ERROR, f"Node id '{node_id}' is used {count} times.", node_id))

    for edge in flow.edges:
        for end in (edge.source, edge.target):
            if end not in ids:
                issues.append(FlowIssue(
                    ERROR, f"Edge '{edge.id}' references unknown node '{end}'.", edge_id=edge.id,
                ))

    issues.extend(_check_triggers(flow))
    issues.extend(_check_condition_branches(flow))
    issues.extend(_check_delays(flow))
    return issues


def has_errors(issues: List[FlowIssue]) -> bool:
    return any(i.level == ERROR for i in issues)

"""Pydantic models for the OverSeek automation flow JSON format.

A flow is saved and loaded as ``{"nodes": [...], "edges": [...]}``, the shape
the canvas emits. Node ``data.config`` stays an open JSON object on the wire;
`narrow_config` turns it into the typed variant for its node kind.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeKind(str, Enum):
    """Types of nodes on the automation canvas."""

    TRIGGER = "trigger"  # Entry point, fired by an external event
    ACTION = "action"  # Send email, SMS, tag, webhook...
    DELAY = "delay"  # Wait before continuing
    CONDITION = "condition"  # Branch on field/operator/value rules


class MatchType(str, Enum):
    ALL = "all"
    ANY = "any"


class DelayMode(str, Enum):
    SPECIFIC_PERIOD = "SPECIFIC_PERIOD"
    SPECIFIC_DATE = "SPECIFIC_DATE"
    CUSTOM_FIELD = "CUSTOM_FIELD"


class DelayUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


# Output handles exposed by condition nodes.
TRUE_HANDLE = "true"
FALSE_HANDLE = "false"
BRANCH_HANDLES = (TRUE_HANDLE, FALSE_HANDLE)


class Position(BaseModel):
    """2D position on canvas."""

    x: float
    y: float


class NodeStats(BaseModel):
    """Enrollment counters shown on a node."""

    active: int = 0
    queued: int = 0
    completed: int = 0
    skipped: Optional[int] = None
    failed: Optional[int] = None


class NodeData(BaseModel):
    """Display name + type-specific config of a node."""

    model_config = ConfigDict(extra="allow")

    label: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)
    stats: Optional[NodeStats] = None

    @field_validator("config", mode="before")
    @classmethod
    def _config_or_empty(cls, value: Any) -> Any:
        # Older flows saved `config: null` for nodes dropped without one.
        return {} if value is None else value


class FlowNode(BaseModel):
    """A node in the automation flow."""

    id: str
    type: NodeKind
    position: Position
    data: NodeData = Field(default_factory=NodeData)

    def typed_config(self) -> "NodeConfig":
        return narrow_config(self.type, self.data.config)


class FlowEdge(BaseModel):
    """A directed connection between two nodes."""

    id: str
    source: str
    target: str
    sourceHandle: Optional[str] = None  # "true"/"false" on condition nodes
    targetHandle: Optional[str] = None
    animated: bool = True


class FlowDefinition(BaseModel):
    """The `{nodes, edges}` payload exchanged on load and save."""

    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "FlowDefinition":
        return cls.model_validate(json.loads(raw))


class StoredFlow(FlowDefinition):
    """A saved flow definition."""

    id: str
    name: str
    description: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def definition(self) -> FlowDefinition:
        return FlowDefinition(nodes=self.nodes, edges=self.edges)


class FlowCreateRequest(BaseModel):
    """Request to create a new flow."""

    name: str
    description: str = ""
    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)


class FlowUpdateRequest(BaseModel):
    """Request to update an existing flow."""

    name: Optional[str] = None
    description: Optional[str] = None
    nodes: Optional[List[FlowNode]] = None
    edges: Optional[List[FlowEdge]] = None


# --- Typed config variants ---------------------------------------------------


class _ConfigBase(BaseModel):
    # Keys the UI doesn't know yet must survive a load/save cycle.
    model_config = ConfigDict(extra="allow", use_enum_values=True)


class TriggerConfig(_ConfigBase):
    triggerType: str = "ORDER_CREATED"
    filterByValue: bool = False
    filterOperator: str = "gt"
    filterValue: Optional[Union[str, float]] = None


class ActionConfig(_ConfigBase):
    actionType: str = "SEND_EMAIL"
    subject: Optional[str] = None
    templateId: Optional[str] = None
    smsMessage: Optional[str] = None
    isTransactional: bool = False
    tagName: Optional[str] = None
    webhookUrl: Optional[str] = None
    targetNodeId: Optional[str] = None
    goalName: Optional[str] = None


class DelayConfig(_ConfigBase):
    delayMode: DelayMode = DelayMode.SPECIFIC_PERIOD
    duration: int = 1
    unit: DelayUnit = DelayUnit.HOURS
    useContactTimezone: bool = False
    delayUntilTimeEnabled: bool = False
    delayUntilTime: Optional[str] = None
    delayUntilDaysEnabled: bool = False
    delayUntilDays: List[str] = Field(default_factory=list)
    jumpIfPassed: bool = False
    specificDate: Optional[str] = None
    customFieldKey: Optional[str] = None


class ConditionRule(BaseModel):
    model_config = ConfigDict(extra="allow")

    field: str = ""
    operator: str = ""
    value: Any = ""


class ConditionConfig(_ConfigBase):
    field: Optional[str] = None
    operator: Optional[str] = None
    value: Any = None
    matchType: MatchType = MatchType.ALL
    group: Optional[str] = None
    conditions: List[ConditionRule] = Field(default_factory=list)


NodeConfig = Union[TriggerConfig, ActionConfig, DelayConfig, ConditionConfig]

_CONFIG_MODELS = {
    NodeKind.TRIGGER: TriggerConfig,
    NodeKind.ACTION: ActionConfig,
    NodeKind.DELAY: DelayConfig,
    NodeKind.CONDITION: ConditionConfig,
}


def narrow_config(kind: Union[NodeKind, str], raw: Any) -> NodeConfig:
    """Validate an open config bag into the variant for `kind`.

    Non-dict input is treated as an empty config. Raises pydantic's
    ValidationError when a known field has an unusable value.
    """
    model = _CONFIG_MODELS[NodeKind(kind)]
    data = dict(raw) if isinstance(raw, dict) else {}
    return model.model_validate(data)


def config_to_dict(config: NodeConfig) -> Dict[str, Any]:
    """Serialize a typed config back to the JSON bag stored on a node."""
    return config.model_dump(mode="json", exclude_none=True)

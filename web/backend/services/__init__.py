"""Backend services."""

from .flow_store import FlowStore, default_flows_dir, get_flow_store, reset_flow_store, resolve_flows_dir

__all__ = ["FlowStore", "default_flows_dir", "get_flow_store", "reset_flow_store", "resolve_flows_dir"]

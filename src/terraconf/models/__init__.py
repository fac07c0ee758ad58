"""Data models for terraconf."""

from terraconf.models.overlay import AttributeOverlay
from terraconf.models.state import InstanceState, ModuleState, ResourceState, StateDocument
from terraconf.models.values import AttributeValue, ListValue, MapValue, Primitive

__all__ = [
    "AttributeOverlay",
    "AttributeValue",
    "InstanceState",
    "ListValue",
    "MapValue",
    "ModuleState",
    "Primitive",
    "ResourceState",
    "StateDocument",
]

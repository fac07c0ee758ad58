"""Attribute Tree Builder.

Decides which top-level attributes of a resource are rendered and where
each value comes from: the resource's flat attribute map or the overlay's
defaults.
"""

from dataclasses import dataclass
from typing import Any, Optional

from terraconf.models.config import RenderOptions
from terraconf.models.overlay import AttributeOverlay
from terraconf.models.state import ResourceState
from terraconf.models.values import AttributeValue, ListValue, MapValue, to_attribute_value
from terraconf.state import flatmap
from terraconf.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlannedAttribute:
    """A top-level attribute selected for rendering.

    Attributes:
        name: Top-level attribute name
        value: Value to render
        from_default: True if the value comes from the overlay defaults
    """

    name: str
    value: AttributeValue
    from_default: bool = False


def discover_attribute_names(attributes: dict[str, str]) -> set[str]:
    """Return the unique top-level attribute names of a flat attribute map.

    Examples:
        >>> sorted(discover_attribute_names({"name": "a", "tags.%": "1", "tags.env": "b"}))
        ['name', 'tags']
    """
    return set(flatmap.FlatMap(attributes).keys_top())


def resolve_attribute_names(
    attributes: dict[str, str], defaults: dict[str, Any]
) -> dict[str, bool]:
    """Map every candidate attribute name to whether it is absent from state.

    Names discovered in state map to False. Default names not found in state
    map to True. The flag is fixed here and not re-checked while rendering.
    """
    names = dict.fromkeys(discover_attribute_names(attributes), False)
    for name in defaults:
        names.setdefault(name, True)
    return names


def _is_empty_collection(value: AttributeValue) -> bool:
    if isinstance(value, ListValue):
        return not value.items
    if isinstance(value, MapValue):
        return not value.entries
    return False


def plan_attributes(
    state: ResourceState,
    overlay: Optional[AttributeOverlay] = None,
    options: Optional[RenderOptions] = None,
) -> list[PlannedAttribute]:
    """Select, order and resolve the attributes of one resource.

    Precedence per name:

    1. Excluded names (always including "id") are dropped.
    2. Names absent from state with a default use the default; the flat-key
       expander is not consulted.
    3. Everything else is expanded from the flat attribute map.

    Args:
        state: Resource to plan
        overlay: Defaults and excludes (not modified)
        options: Render options (strictness, empty collection handling)

    Returns:
        Planned attributes sorted by name

    Raises:
        UnsupportedValueError: Strict mode, value of unsupported kind
        MalformedListError: Strict mode, list mixing primitives and maps
        FlatmapError: Malformed flat attribute map
    """
    overlay = overlay or AttributeOverlay()
    options = options or RenderOptions()
    excludes = overlay.effective_excludes()
    attributes = state.attributes

    planned = []
    for name, absent_from_state in sorted(
        resolve_attribute_names(attributes, overlay.defaults).items()
    ):
        if name in excludes:
            logger.debug("attribute_excluded", attribute=name)
            continue

        if absent_from_state and name in overlay.defaults:
            value = to_attribute_value(name, overlay.defaults[name], options.strict)
            planned.append(PlannedAttribute(name, value, from_default=True))
            continue

        value = to_attribute_value(name, flatmap.expand(attributes, name), options.strict)
        if options.skip_empty_collections and _is_empty_collection(value):
            logger.debug("empty_collection_skipped", attribute=name)
            continue
        planned.append(PlannedAttribute(name, value))

    return planned

"""Attribute value shapes rendered into block syntax.

Every attribute value is exactly one of three shapes:

- Primitive: a string, bool or int
- ListValue: an ordered list of primitives, or of maps
- MapValue: string keys to nested values

Raw Python values coming from the flat-key expander or from caller defaults
are converted with to_attribute_value(), which is the only place where
unexpected kinds are detected.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from terraconf.exceptions import MalformedListError, UnsupportedValueError
from terraconf.utils.logging import get_logger

logger = get_logger(__name__)

# Bare token emitted for values of unknown kind in lenient mode
UNKNOWN_LITERAL = "unknown"


@dataclass(frozen=True)
class Primitive:
    """A single string, bool or int.

    Attributes:
        value: The primitive value
        literal: If True, value is a pre-rendered token emitted unquoted
    """

    value: Union[str, bool, int]
    literal: bool = False


@dataclass(frozen=True)
class MapValue:
    """Unordered string-keyed entries; rendered sorted by key."""

    entries: dict[str, "AttributeValue"] = field(default_factory=dict)


@dataclass(frozen=True)
class ListValue:
    """Ordered list whose shape is decided by its first element.

    Attributes:
        items: Either all Primitive or all MapValue
    """

    items: tuple["AttributeValue", ...] = ()

    @property
    def is_primitive_list(self) -> bool:
        """True if the list is empty or holds primitives."""
        return not self.items or isinstance(self.items[0], Primitive)


AttributeValue = Union[Primitive, ListValue, MapValue]


def is_primitive(raw: Any) -> bool:
    """Check if a raw value is a supported primitive kind."""
    return isinstance(raw, (str, bool, int))


def to_attribute_value(name: str, raw: Any, strict: bool = True) -> AttributeValue:
    """Convert a raw Python value into an AttributeValue.

    Args:
        name: Attribute name (used for error messages and logs)
        raw: Value from the flat-key expander or a caller default
        strict: If False, degrade instead of raising (compatibility mode)

    Returns:
        The converted value

    Raises:
        UnsupportedValueError: If strict and raw (or a nested value) has an
            unsupported kind
        MalformedListError: If strict and a list mixes primitives and maps

    Examples:
        >>> to_attribute_value("port", 80)
        Primitive(value=80, literal=False)
        >>> to_attribute_value("ratio", 0.5, strict=False)
        Primitive(value='unknown', literal=True)
    """
    if is_primitive(raw):
        return Primitive(raw)

    if isinstance(raw, dict):
        return MapValue(
            {str(k): to_attribute_value(str(k), v, strict) for k, v in raw.items()}
        )

    if isinstance(raw, (list, tuple)):
        return _to_list_value(name, list(raw), strict)

    if strict:
        raise UnsupportedValueError(name, raw)

    logger.warning("unknown_value_kind", attribute=name, kind=type(raw).__name__)
    return Primitive(UNKNOWN_LITERAL, literal=True)


def _to_list_value(name: str, raw: list[Any], strict: bool) -> ListValue:
    if not raw:
        return ListValue()

    first = raw[0]
    if is_primitive(first):
        expected, matches = "primitive", is_primitive
    elif isinstance(first, dict):
        expected, matches = "map", lambda item: isinstance(item, dict)
    else:
        # Lists of lists or of unknown kinds have no block rendering
        if strict:
            raise UnsupportedValueError(name, raw)
        logger.warning("list_skipped", attribute=name, kind=type(first).__name__)
        return ListValue()

    items = []
    for index, item in enumerate(raw):
        if not matches(item):
            if strict:
                raise MalformedListError(name, index, expected)
            logger.warning(
                "list_element_skipped", attribute=name, index=index, expected=expected
            )
            continue
        items.append(to_attribute_value(name, item, strict))

    return ListValue(tuple(items))

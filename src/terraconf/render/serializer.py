"""Block Serializer.

Renders attribute values and whole resources into raw block syntax, then
hands the text to the formatter. Raw text is deliberately unindented; the
formatter owns layout.

Primitive rules:

- strings are double-quoted with backslash escapes
- booleans are the quoted strings "true" / "false"
- integers are bare decimal digits
"""

import re
from typing import Callable, Optional

from terraconf.hcl.formatter import format_block
from terraconf.models.config import RenderOptions
from terraconf.models.overlay import AttributeOverlay
from terraconf.models.state import ResourceState
from terraconf.models.values import AttributeValue, ListValue, MapValue, Primitive
from terraconf.render.attributes import plan_attributes
from terraconf.state.flatmap import DELIMITER
from terraconf.utils.logging import get_logger

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*\Z")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def sanitize_resource_id(resource_id: str) -> str:
    """Make a resource ID usable as a block label.

    The attribute path delimiter "." is replaced with "_".

    Examples:
        >>> sanitize_resource_id("my.test.resource")
        'my_test_resource'
    """
    return resource_id.replace(DELIMITER, "_")


def quote_string(value: str) -> str:
    """Quote a string, escaping backslashes, quotes and control characters.

    Interpolation sequences such as "${aws_subnet.a.id}" pass through
    unchanged so defaults can reference other resources.
    """
    chars = []
    for char in value:
        if char in _ESCAPES:
            chars.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            chars.append(f"\\u{ord(char):04x}")
        else:
            chars.append(char)
    return '"' + "".join(chars) + '"'


def render_primitive_value(value: Primitive) -> str:
    """Render a primitive as a literal."""
    if value.literal:
        return str(value.value)
    # bool is checked first, it is a subclass of int
    if isinstance(value.value, bool):
        return '"true"' if value.value else '"false"'
    if isinstance(value.value, int):
        return str(value.value)
    return quote_string(value.value)


def render_primitive_attribute(name: str, value: Primitive) -> str:
    """Render ``name = <literal>``.

    An empty ``date`` string renders nothing; state records that artifact
    for attributes the user never set.
    """
    literal = render_primitive_value(value)
    if name == "date" and literal == '""':
        return ""
    return f"{name} = {literal}\n"


def render_primitive_list(name: str, items: tuple[AttributeValue, ...]) -> str:
    """Render a list of primitives as a list assignment."""
    body = "".join(f"{render_primitive_value(item)}," for item in items)
    return f"{name} = [\n{body}]\n"


def render_key(key: str) -> str:
    """Render a map key, quoting it unless it is a bare identifier.

    Examples:
        >>> render_key("Name")
        'Name'
        >>> render_key("aws:cloudformation:stack-name")
        '"aws:cloudformation:stack-name"'
    """
    if _IDENTIFIER.match(key):
        return key
    return quote_string(key)


def render_map(name: str, value: MapValue) -> str:
    """Render a map as a nested block, entries sorted by key."""
    body = "".join(
        render_value(render_key(key), value.entries[key]) for key in sorted(value.entries)
    )
    return f"{name} {{\n{body}}}\n"


def render_value(name: str, value: AttributeValue) -> str:
    """Render a named value of any shape.

    A list of maps renders as one block per element, each using ``name``.
    """
    if isinstance(value, Primitive):
        return render_primitive_attribute(name, value)
    if isinstance(value, MapValue):
        return render_map(name, value)
    if isinstance(value, ListValue):
        if value.is_primitive_list:
            return render_primitive_list(name, value.items)
        return "".join(render_map(name, item) for item in value.items)
    raise TypeError(f"Not an attribute value: {value!r}")


def render_dependencies(dependencies: list[str]) -> str:
    """Render a depends_on list, keeping the recorded order."""
    if not dependencies:
        return ""
    return render_primitive_list(
        "depends_on", tuple(Primitive(dependency) for dependency in dependencies)
    )


def render_resource_text(
    state: ResourceState,
    overlay: Optional[AttributeOverlay] = None,
    options: Optional[RenderOptions] = None,
) -> str:
    """Render a resource into raw, unformatted block text."""
    parts = [f'resource "{state.type}" "{sanitize_resource_id(state.primary_id)}" {{\n']

    for attribute in plan_attributes(state, overlay, options):
        logger.debug(
            "attribute_planned", attribute=attribute.name, from_default=attribute.from_default
        )
        parts.append(render_value(attribute.name, attribute.value))

    parts.append(render_dependencies(state.dependencies))
    parts.append("}\n")
    return "".join(parts)


def render_resource_block(
    state: ResourceState,
    overlay: Optional[AttributeOverlay] = None,
    options: Optional[RenderOptions] = None,
    formatter: Callable[[str], str] = format_block,
) -> str:
    """Render a resource as formatted block syntax.

    Args:
        state: Resource to render
        overlay: Defaults and excludes; the caller's sets are not modified
        options: Render options
        formatter: Turns raw block text into canonical text

    Returns:
        The formatter's output, unchanged

    Raises:
        FormatError: If the formatter rejects the raw text (carries it)
        UnsupportedValueError: Strict mode, value of unsupported kind
        MalformedListError: Strict mode, list mixing primitives and maps
    """
    raw = render_resource_text(state, overlay, options)
    text = formatter(raw)
    logger.info("resource_rendered", type=state.type, id=state.primary_id)
    return text

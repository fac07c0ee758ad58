"""Flat attribute map encoding used by legacy Terraform state.

Nested attribute values are stored as a single level of string keys joined
with ".":

- ``tags.%`` holds the element count of a map, ``tags.Name`` one entry
- ``ports.#`` holds the element count of a list, ``ports.0`` the first item
- set elements use hash codes instead of ordinal indices (``ports.1893``)
- a ``~`` prefix on an index marks a computed element

This module expands those keys back into Python values and flattens values
into keys again.
"""

from typing import Any

from terraconf.exceptions import FlatmapError

DELIMITER = "."
LIST_COUNT = "#"
MAP_COUNT = "%"
COMPUTED_PREFIX = "~"

# Placeholder Terraform writes for values not known until apply
UNKNOWN_VARIABLE_VALUE = "74D93920-ED26-11E3-AC10-0800200C9A66"


def top_level_name(key: str) -> str:
    """Return the first path segment of a flat key."""
    return key.split(DELIMITER, 1)[0]


def expand(flat: dict[str, str], key: str) -> Any:
    """Expand the value stored under ``key`` in a flat attribute map.

    Args:
        flat: Flat attribute map (string keys and values)
        key: Attribute path to expand (e.g. "tags" or "ebs_block_device.0")

    Returns:
        A string or bool for primitive keys, a list for keys with a ``.#``
        count, a dict for keys with nested entries, or None when nothing is
        stored under ``key``.

    Raises:
        FlatmapError: If a list count or index is not an integer

    Examples:
        >>> expand({"ports.#": "2", "ports.0": "80", "ports.1": "443"}, "ports")
        ['80', '443']
        >>> expand({"tags.%": "1", "tags.Name": "web"}, "tags")
        {'Name': 'web'}
    """
    if key in flat:
        value = flat[key]
        if value == "true":
            return True
        if value == "false":
            return False
        return value

    count_key = f"{key}{DELIMITER}{LIST_COUNT}"
    if count_key in flat:
        # An unknown count is passed through so it stays visible in output
        if flat[count_key] == UNKNOWN_VARIABLE_VALUE:
            return flat[count_key]
        return _expand_list(flat, key)

    prefix = key + DELIMITER
    if any(k.startswith(prefix) for k in flat):
        return _expand_map(flat, prefix)

    return None


def _expand_list(flat: dict[str, str], key: str) -> list[Any]:
    count_key = f"{key}{DELIMITER}{LIST_COUNT}"
    try:
        count = int(flat[count_key])
    except ValueError as e:
        raise FlatmapError(count_key, "List count is not an integer") from e

    # Children of a zero-length list can linger in state with stale counts
    if count == 0:
        return []

    # The count is only a hint. Indices may be set hash codes, so collect
    # whatever indices exist and expand them in numeric order.
    prefix = key + DELIMITER
    indices: set[int] = set()
    computed: set[int] = set()
    for k in flat:
        if not k.startswith(prefix):
            continue
        segment = top_level_name(k[len(prefix):])
        if segment == LIST_COUNT:
            continue
        is_computed = segment.startswith(COMPUTED_PREFIX)
        if is_computed:
            segment = segment[1:]
        try:
            index = int(segment)
        except ValueError as e:
            raise FlatmapError(k, "List index is not an integer") from e
        indices.add(index)
        if is_computed:
            computed.add(index)

    result = []
    for index in sorted(indices):
        marker = COMPUTED_PREFIX if index in computed else ""
        result.append(expand(flat, f"{prefix}{marker}{index}"))
    return result


def _expand_map(flat: dict[str, str], prefix: str) -> dict[str, Any]:
    # Nested maps may not carry a "%" count, only an explicit 0 is trusted
    if flat.get(prefix + MAP_COUNT) == "0":
        return {}

    result: dict[str, Any] = {}
    for k in flat:
        if not k.startswith(prefix):
            continue
        name = top_level_name(k[len(prefix):])
        if name == MAP_COUNT or name in result:
            continue
        result[name] = expand(flat, prefix + name)
    return result


def flatten(thing: dict[str, Any]) -> "FlatMap":
    """Flatten a mapping of attribute names to values into a FlatMap.

    Bools become "true"/"false", ints their decimal digits, lists get a
    ``.#`` count and ordinal indices, dicts are joined with ".". Map counts
    are not written.

    Raises:
        FlatmapError: If a value or map key has an unsupported type
    """
    result = FlatMap()
    for key, value in thing.items():
        _flatten_into(result, key, value)
    return result


def _flatten_into(result: dict[str, str], prefix: str, value: Any) -> None:
    if isinstance(value, bool):
        result[prefix] = "true" if value else "false"
    elif isinstance(value, int):
        result[prefix] = str(value)
    elif isinstance(value, str):
        result[prefix] = value
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise FlatmapError(prefix, f"Map key {k!r} is not a string")
            _flatten_into(result, f"{prefix}{DELIMITER}{k}", v)
    elif isinstance(value, (list, tuple)):
        result[f"{prefix}{DELIMITER}{LIST_COUNT}"] = str(len(value))
        for i, item in enumerate(value):
            _flatten_into(result, f"{prefix}{DELIMITER}{i}", item)
    else:
        raise FlatmapError(prefix, f"Cannot flatten {type(value).__name__}")


class FlatMap(dict):
    """A flat attribute map with helpers for whole-attribute operations."""

    def delete(self, prefix: str) -> None:
        """Remove ``prefix`` and every key nested below it."""
        nested = prefix + DELIMITER
        for key in [k for k in self if k == prefix or k.startswith(nested)]:
            del self[key]

    def keys_top(self) -> list[str]:
        """Return the sorted unique top-level attribute names."""
        return sorted({top_level_name(k) for k in self})

    def merge(self, other: dict[str, str]) -> None:
        """Copy every key of ``other`` into this map, overwriting on conflict."""
        self.update(other)

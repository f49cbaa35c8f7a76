"""Path-addressed immutable edits over plain JSON values

A JSON value is a primitive (str, int, float, bool, None), a dict of
str -> JSON value, or a list of JSON values. The helpers here never mutate
their input:

- sanitize_to_json_value: deep copy arbitrary data into the JSON universe
- read_json_at_path / update_json_at_path: follow a path of keys/indices
- parse_leaf_edit: infer the type of a leaf edited as text
- round_numbers: round floats for export
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Sequence

from .errors import JsonPathError

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | dict[str, Any] | list[Any]
PathSegment = str | int

_NUMBER_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")

# Marker for values that have no JSON representation
_DROP = object()


def _sanitize(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else _DROP
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                continue
            clean = _sanitize(item)
            if clean is not _DROP:
                result[key] = clean
        return result
    if isinstance(value, (list, tuple)):
        items = (_sanitize(item) for item in value)
        return [item for item in items if item is not _DROP]
    return _DROP


def sanitize_to_json_value(value: Any) -> JSONValue:
    """Deep-copy a value into plain JSON, dropping unrepresentable members.

    Mapping members and sequence items whose value is not representable
    (arbitrary objects, NaN/infinity, non-string keys) are silently dropped.
    Tuples become lists. A top-level unrepresentable value becomes None.
    """
    clean = _sanitize(value)
    return None if clean is _DROP else clean


def _step(node: Any, segment: PathSegment, path: Sequence[PathSegment]) -> Any:
    """Return the child of node addressed by segment, or raise."""
    if isinstance(node, dict):
        if not isinstance(segment, str):
            raise JsonPathError(f"Mapping key must be a string, got {segment!r}", path)
        if segment not in node:
            raise JsonPathError(f"Key {segment!r} not found", path)
        return node[segment]
    if isinstance(node, list):
        _check_index(node, segment, path)
        return node[segment]
    raise JsonPathError(f"Cannot index into primitive {node!r} with {segment!r}", path)


def _check_index(node: list, segment: PathSegment, path: Sequence[PathSegment]) -> None:
    # bool is a subclass of int and is never a valid index
    if isinstance(segment, bool) or not isinstance(segment, int):
        raise JsonPathError(f"Sequence index must be an integer, got {segment!r}", path)
    if segment < 0 or segment >= len(node):
        raise JsonPathError(
            f"Index {segment} out of range for sequence of length {len(node)}", path
        )


def read_json_at_path(root: JSONValue, path: Sequence[PathSegment]) -> JSONValue:
    """Return the value reached by following path from root."""
    node: Any = root
    for depth, segment in enumerate(path):
        node = _step(node, segment, path[: depth + 1])
    return node


def update_json_at_path(
    root: JSONValue,
    path: Sequence[PathSegment],
    new_value: JSONValue,
) -> JSONValue:
    """Return a copy of root with the value at path replaced by new_value.

    Only the containers along the path are copied; every sibling subtree is
    shared with the original. An empty path replaces the whole value.

    The final segment may name a key missing from a mapping (the key is
    added). Every other mismatch between path and tree shape raises
    JsonPathError.

    Examples:
        update_json_at_path({"a": {"b": 1}}, ["a", "b"], 5) -> {"a": {"b": 5}}
        update_json_at_path([1, 2], [1], None) -> [1, None]
    """
    if not path:
        return new_value

    head, rest = path[0], path[1:]
    consumed = path[: len(path) - len(rest)]

    if isinstance(root, dict):
        if not isinstance(head, str):
            raise JsonPathError(f"Mapping key must be a string, got {head!r}", consumed)
        if rest:
            child = _step(root, head, consumed)
            replacement = update_json_at_path_from(child, rest, new_value, consumed)
        else:
            replacement = new_value
        copied = dict(root)
        copied[head] = replacement
        return copied

    if isinstance(root, list):
        _check_index(root, head, consumed)
        if rest:
            replacement = update_json_at_path_from(root[head], rest, new_value, consumed)
        else:
            replacement = new_value
        copied_list = list(root)
        copied_list[head] = replacement
        return copied_list

    raise JsonPathError(f"Cannot index into primitive {root!r} with {head!r}", consumed)


def update_json_at_path_from(
    node: JSONValue,
    path: Sequence[PathSegment],
    new_value: JSONValue,
    prefix: Sequence[PathSegment],
) -> JSONValue:
    """Recurse into update_json_at_path, keeping full paths in error reports."""
    try:
        return update_json_at_path(node, path, new_value)
    except JsonPathError as exc:
        raise JsonPathError(str(exc), list(prefix) + exc.path) from None


def parse_leaf_edit(text: str) -> JSONPrimitive:
    """Infer the JSON value for a leaf edited as text.

    Rules:
    - "" -> None
    - integer or decimal literal (e.g. "-3", "2.50") -> int or float
    - "true" / "false" -> bool
    - anything else stays a string
    """
    if text == "":
        return None
    if _NUMBER_PATTERN.fullmatch(text):
        return float(text) if "." in text else int(text)
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def round_numbers(value: JSONValue, precision: int = 2) -> JSONValue:
    """Recursively round every float in value to precision decimals.

    Floats are rounded from their shortest decimal form, halves away from
    zero. Ints, bools and non-finite floats are returned unchanged.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return value
        with localcontext() as ctx:
            # Enough digits for the largest float at any precision
            ctx.prec = 320 + precision
            rounded = Decimal(repr(value)).quantize(Decimal(1).scaleb(-precision), ROUND_HALF_UP)
        if rounded == 0:
            return 0.0
        return float(rounded)
    if isinstance(value, dict):
        return {key: round_numbers(item, precision) for key, item in value.items()}
    if isinstance(value, list):
        return [round_numbers(item, precision) for item in value]
    return value

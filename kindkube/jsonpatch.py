"""JSON merge patches (RFC 7386) and JSON patches (RFC 6902)."""

from __future__ import annotations

import copy
import json
from typing import Any


class JSONPatchError(Exception):
    """Raised when a JSON patch is malformed or cannot be applied."""


def merge_patch(target: Any, patch: Any) -> Any:
    """Return target with the merge patch applied; inputs are not modified."""
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result


def decode_patch(raw: str | bytes) -> list[dict[str, Any]]:
    """Parse a JSON patch document into its list of operations."""
    try:
        operations = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise JSONPatchError(f"invalid JSON patch: {exc}") from exc
    if not isinstance(operations, list) or not all(isinstance(o, dict) for o in operations):
        raise JSONPatchError("a JSON patch must be an array of operation objects")
    return operations


def _tokens(pointer: Any) -> list[str]:
    if not isinstance(pointer, str):
        raise JSONPatchError(f"invalid JSON pointer: {pointer!r}")
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise JSONPatchError(f"JSON pointer must start with '/': {pointer!r}")
    return [t.replace("~1", "/").replace("~0", "~") for t in pointer[1:].split("/")]


def _index(token: str, length: int, allow_end: bool) -> int:
    if token == "-" and allow_end:
        return length
    if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
        raise JSONPatchError(f"invalid array index: {token!r}")
    index = int(token)
    if index > length or (index == length and not allow_end):
        raise JSONPatchError(f"array index out of range: {index}")
    return index


def _child(container: Any, token: str) -> Any:
    if isinstance(container, dict):
        if token not in container:
            raise JSONPatchError(f"missing key: {token!r}")
        return container[token]
    if isinstance(container, list):
        return container[_index(token, len(container), False)]
    raise JSONPatchError(f"cannot traverse into a scalar with {token!r}")


def _get(document: Any, tokens: list[str]) -> Any:
    node = document
    for token in tokens:
        node = _child(node, token)
    return node


def _add(document: Any, tokens: list[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _get(document, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        parent[last] = value
    elif isinstance(parent, list):
        parent.insert(_index(last, len(parent), True), value)
    else:
        raise JSONPatchError(f"cannot add to a scalar at {last!r}")
    return document


def _remove(document: Any, tokens: list[str]) -> Any:
    if not tokens:
        raise JSONPatchError("cannot remove the document root")
    parent = _get(document, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        if last not in parent:
            raise JSONPatchError(f"cannot remove missing key {last!r}")
        return parent.pop(last)
    if isinstance(parent, list):
        return parent.pop(_index(last, len(parent), False))
    raise JSONPatchError(f"cannot remove from a scalar at {last!r}")


def _value(operation: dict[str, Any]) -> Any:
    if "value" not in operation:
        raise JSONPatchError(f"operation {operation.get('op')!r} needs a value")
    return copy.deepcopy(operation["value"])


def apply_patch(document: Any, operations: list[dict[str, Any]]) -> Any:
    """Return document with the JSON patch operations applied in order."""
    result = copy.deepcopy(document)
    for operation in operations:
        op = operation.get("op")
        path = _tokens(operation.get("path"))
        match op:
            case "add":
                result = _add(result, path, _value(operation))
            case "remove":
                _remove(result, path)
            case "replace":
                _get(result, path)
                if path:
                    _remove(result, path)
                result = _add(result, path, _value(operation))
            case "move":
                source = _tokens(operation.get("from"))
                if source:
                    moved = _remove(result, source)
                else:
                    moved = result
                result = _add(result, path, moved)
            case "copy":
                source = _tokens(operation.get("from"))
                result = _add(result, path, copy.deepcopy(_get(result, source)))
            case "test":
                if _get(result, path) != operation.get("value"):
                    raise JSONPatchError(f"test failed at {operation.get('path')!r}")
            case _:
                raise JSONPatchError(f"unknown operation: {op!r}")
    return result
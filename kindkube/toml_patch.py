"""Patching TOML documents with merge patches and JSON 6902 patches."""

from __future__ import annotations

import datetime
import json
import re
import tomllib
from typing import Any

from kindkube.jsonpatch import JSONPatchError, apply_patch, decode_patch, merge_patch


class PatchError(Exception):
    """Raised when a document or a patch cannot be parsed or applied."""


def toml_to_data(text: str) -> dict[str, Any]:
    """Parse TOML text into plain data."""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise PatchError(f"invalid TOML: {exc}") from exc


def patch_toml(to_patch: str, patches=None, patches6902=None) -> str:
    """Apply TOML merge patches, then JSON 6902 patches, to to_patch."""
    data: Any = toml_to_data(to_patch)
    for patch in patches or []:
        data = merge_patch(data, toml_to_data(patch))
    for raw in patches6902 or []:
        try:
            data = apply_patch(data, decode_patch(raw))
        except JSONPatchError as exc:
            raise PatchError(str(exc)) from exc
    if not isinstance(data, dict):
        raise PatchError("patched TOML document must be a table")
    return dump_toml(data)


_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def _key(name: str) -> str:
    return name if _BARE_KEY.match(name) else json.dumps(name, ensure_ascii=False)


def _value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        if text in ("inf", "-inf", "nan"):
            return text
        return text if any(c in text for c in ".eE") else text + ".0"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, list):
        return "[" + ", ".join(_value(v) for v in value if v is not None) + "]"
    if isinstance(value, dict):
        items = (f"{_key(k)} = {_value(v)}" for k, v in sorted(value.items()) if v is not None)
        return "{" + ", ".join(items) + "}"
    raise PatchError(f"cannot encode {type(value).__name__} as TOML")


def _is_table_array(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, dict) for v in value)


def _table(out: list[str], path: list[str], mapping: dict[str, Any]) -> None:
    indent = "  " * len(path)
    tables = []
    for name in sorted(mapping):
        value = mapping[name]
        if value is None:
            continue
        if isinstance(value, dict) or _is_table_array(value):
            tables.append(name)
        else:
            out.append(f"{indent}{_key(name)} = {_value(value)}")
    for name in tables:
        sub = [*path, name]
        header = ".".join(_key(p) for p in sub)
        head_indent = "  " * (len(sub) - 1)
        value = mapping[name]
        bodies = [value] if isinstance(value, dict) else value
        brackets = ("[", "]") if isinstance(value, dict) else ("[[", "]]")
        for body in bodies:
            if len(sub) == 1 and out:
                out.append("")
            out.append(f"{head_indent}{brackets[0]}{header}{brackets[1]}")
            _table(out, sub, body)


def dump_toml(data: dict[str, Any]) -> str:
    """Encode a table as TOML with sorted keys and indented sub-tables."""
    out: list[str] = []
    _table(out, [], data)
    return "\n".join(out) + "\n" if out else ""
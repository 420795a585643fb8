"""Patching streams of Kubernetes YAML documents matched on kind and apiVersion."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import yaml

from kindkube.jsonpatch import JSONPatchError, apply_patch, decode_patch, merge_patch
from kindkube.toml_patch import PatchError

_SEPARATOR = "\n---"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _Loader(yaml.SafeLoader):
    """Safe loader that keeps timestamp-looking scalars as strings."""


_Loader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class PatchJSON6902:
    """A JSON 6902 patch targeting resources of a group, version and kind."""

    group: str = ""
    version: str = ""
    kind: str = ""
    patch: str = ""


@dataclass
class MatchInfo:
    """The type metadata resources and patches are matched on."""

    kind: str = ""
    api_version: str = ""


@dataclass
class _MergePatch:
    raw: str
    data: Any
    match_info: MatchInfo


@dataclass
class _JSON6902Patch:
    raw: str
    operations: list[dict[str, Any]]
    match_info: MatchInfo


def _load(raw: str) -> Any:
    try:
        data = yaml.load(raw, Loader=_Loader)
        return json.loads(json.dumps(data))
    except (yaml.YAMLError, TypeError, ValueError) as exc:
        raise PatchError(f"failed to parse YAML {raw!r}: {exc}") from exc


@dataclass
class Resource:
    """One YAML document of the stream, held as JSON-compatible data."""

    raw: str
    data: Any
    match_info: MatchInfo = field(default_factory=MatchInfo)

    def matches(self, other: MatchInfo) -> bool:
        """Kind must match; apiVersion only when the other side sets it."""
        return self.match_info.kind == other.kind and (
            not other.api_version or self.match_info.api_version == other.api_version
        )

    def apply_merge_patch(self, patch: _MergePatch) -> bool:
        """Apply a merge patch if it matches; return whether it matched."""
        if not self.matches(patch.match_info):
            return False
        self.data = merge_patch(self.data, patch.data)
        return True

    def apply_6902_patch(self, patch: _JSON6902Patch) -> bool:
        """Apply a JSON 6902 patch if it matches; return whether it matched."""
        if not self.matches(patch.match_info):
            return False
        try:
            self.data = apply_patch(self.data, patch.operations)
        except JSONPatchError as exc:
            raise PatchError(str(exc)) from exc
        return True

    def encode(self) -> str:
        """Return the resource as YAML with sorted keys."""
        if self.data is None:
            return "null\n"
        return yaml.safe_dump(
            self.data, default_flow_style=False, sort_keys=True, allow_unicode=True, width=2**31 - 1
        )


def split_yaml_documents(stream: str) -> list[str]:
    """Split a YAML stream on '---' separator lines."""
    documents = []
    data = stream
    while data:
        i = data.find(_SEPARATOR)
        if i < 0:
            documents.append(data)
            break
        after = data[i + len(_SEPARATOR):]
        if not after:
            documents.append(data[:i])
            break
        j = after.find("\n")
        if j < 0:
            documents.append(data)
            break
        documents.append(data[:i])
        data = after[j + 1:]
    return documents


def parse_yaml_match_info(raw: str) -> MatchInfo:
    """Read kind and apiVersion from a YAML document."""
    data = _load(raw)
    if data is None:
        return MatchInfo()
    if not isinstance(data, dict):
        raise PatchError(f"failed to parse type meta for {raw!r}")
    kind, api_version = data.get("kind") or "", data.get("apiVersion") or ""
    if not isinstance(kind, str) or not isinstance(api_version, str):
        raise PatchError(f"failed to parse type meta for {raw!r}")
    return MatchInfo(kind=kind, api_version=api_version)


def group_version_to_api_version(group: str, version: str) -> str:
    """Join group and version into an apiVersion."""
    return f"{group}/{version}" if group else version


def parse_resources(stream: str) -> list[Resource]:
    """Parse every document of a YAML stream into a Resource."""
    return [
        Resource(raw=raw, data=_load(raw), match_info=parse_yaml_match_info(raw))
        for raw in split_yaml_documents(stream)
    ]


def parse_merge_patches(raw_patches: list[str]) -> list[_MergePatch]:
    """Parse merge patches, splitting any multi-document streams."""
    return [
        _MergePatch(raw=raw, data=_load(raw), match_info=parse_yaml_match_info(raw))
        for stream in raw_patches
        for raw in split_yaml_documents(stream)
    ]


def _convert_6902(patches: list[PatchJSON6902]) -> list[_JSON6902Patch]:
    converted = []
    for patch in patches:
        try:
            operations = decode_patch(json.dumps(_load(patch.patch)))
        except JSONPatchError as exc:
            raise PatchError(f"failed to parse JSON 6902 patches: {exc}") from exc
        converted.append(
            _JSON6902Patch(
                raw=patch.patch,
                operations=operations,
                match_info=MatchInfo(
                    kind=patch.kind,
                    api_version=group_version_to_api_version(patch.group, patch.version),
                ),
            )
        )
    return converted


def kube_yaml(to_patch: str, patches=None, patches6902=None) -> str:
    """Apply matching merge patches, then JSON 6902 patches, to each document."""
    resources = parse_resources(to_patch)
    merge_patches = parse_merge_patches(list(patches or []))
    json_patches = _convert_6902(list(patches6902 or []))
    for resource in resources:
        for patch in merge_patches:
            resource.apply_merge_patch(patch)
        for patch in json_patches:
            resource.apply_6902_patch(patch)
    return "---\n".join(r.encode() for r in resources)
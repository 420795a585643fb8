"""YAML encoding and decoding of kubeconfig files."""

from __future__ import annotations

import json
from typing import Any

import yaml

from kindkube.types import Config, KubeconfigError, config_from_dict, config_to_dict

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_UNLIMITED_WIDTH = 2**31 - 1


class _Loader(yaml.SafeLoader):
    """Safe loader that keeps timestamp-looking scalars as strings."""


_Loader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _normalize(data: Any) -> Any:
    try:
        return json.loads(json.dumps(data))
    except (TypeError, ValueError) as exc:
        raise KubeconfigError(f"failed to normalize KUBECONFIG encoding: {exc}") from exc


def encode(cfg: Config) -> str:
    """Encode cfg as normalized YAML with sorted keys; an empty config gives ""."""
    data = _normalize(config_to_dict(cfg))
    if not data:
        return ""
    return yaml.dump(
        data,
        Dumper=yaml.SafeDumper,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
        width=_UNLIMITED_WIDTH,
    )


def decode(raw: str | bytes) -> Config:
    """Parse the first YAML document of raw into a Config."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        data = next(iter(yaml.load_all(raw, Loader=_Loader)), None)
    except yaml.YAMLError as exc:
        raise KubeconfigError(f"failed to parse KUBECONFIG: {exc}") from exc
    return config_from_dict(data)
"""Kubeconfig data model and basic helpers for kind cluster entries."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class KubeconfigError(Exception):
    """Raised when a kubeconfig cannot be read, validated or written."""


@dataclass
class Cluster:
    """How to reach a Kubernetes cluster; unknown keys are kept in other_fields."""

    server: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class NamedCluster:
    """A cluster entry with its nickname."""

    name: str = ""
    cluster: Cluster = field(default_factory=Cluster)


@dataclass
class NamedUser:
    """A user entry with its nickname; the user data is kept untouched."""

    name: str = ""
    user: dict[str, Any] = field(default_factory=dict)


@dataclass
class Context:
    """References to a cluster and a user; unknown keys are kept in other_fields."""

    cluster: str = ""
    user: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class NamedContext:
    """A context entry with its nickname."""

    name: str = ""
    context: Context = field(default_factory=Context)


@dataclass
class Config:
    """A kubeconfig with the fields kind inspects; the rest lives in other_fields."""

    clusters: list[NamedCluster] = field(default_factory=list)
    users: list[NamedUser] = field(default_factory=list)
    contexts: list[NamedContext] = field(default_factory=list)
    current_context: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)


def kind_cluster_key(cluster_name: str) -> str:
    """Return the key identifying a kind cluster in kubeconfig files."""
    return "kind-" + cluster_name


def check_kubeadm_expectations(cfg: Config) -> None:
    """Check that a kubeadm kubeconfig has exactly one cluster, user and context."""
    for what, entries in (
        ("cluster", cfg.clusters),
        ("user", cfg.users),
        ("context", cfg.contexts),
    ):
        if len(entries) != 1:
            raise KubeconfigError(
                f"kubeadm KUBECONFIG should have one {what}, but read {len(entries)}"
            )


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise KubeconfigError(f"{what} must be a string, got {type(value).__name__}")


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    raise KubeconfigError(f"{what} must be a mapping, got {type(value).__name__}")


def _sequence(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise KubeconfigError(f"{what} must be a list, got {type(value).__name__}")


def _cluster_from(value: Any) -> NamedCluster:
    entry = _mapping(value, "cluster entry")
    body = _mapping(entry.get("cluster"), "cluster")
    server = _string(body.pop("server", None), "server")
    return NamedCluster(
        name=_string(entry.get("name"), "cluster name"),
        cluster=Cluster(server=server, other_fields=body),
    )


def _user_from(value: Any) -> NamedUser:
    entry = _mapping(value, "user entry")
    return NamedUser(
        name=_string(entry.get("name"), "user name"),
        user=_mapping(entry.get("user"), "user"),
    )


def _context_from(value: Any) -> NamedContext:
    entry = _mapping(value, "context entry")
    body = _mapping(entry.get("context"), "context")
    cluster = _string(body.pop("cluster", None), "context cluster")
    user = _string(body.pop("user", None), "context user")
    return NamedContext(
        name=_string(entry.get("name"), "context name"),
        context=Context(cluster=cluster, user=user, other_fields=body),
    )


def config_from_dict(data: Any) -> Config:
    """Build a Config from parsed kubeconfig data, keeping unknown keys."""
    fields = _mapping(data, "kubeconfig")
    clusters = [_cluster_from(c) for c in _sequence(fields.pop("clusters", None), "clusters")]
    users = [_user_from(u) for u in _sequence(fields.pop("users", None), "users")]
    contexts = [_context_from(c) for c in _sequence(fields.pop("contexts", None), "contexts")]
    current = _string(fields.pop("current-context", None), "current-context")
    return Config(
        clusters=clusters,
        users=users,
        contexts=contexts,
        current_context=current,
        other_fields=fields,
    )


def config_to_dict(cfg: Config) -> dict[str, Any]:
    """Return the kubeconfig document for cfg, with unknown keys inlined."""
    out: dict[str, Any] = copy.deepcopy(cfg.other_fields)
    if cfg.clusters:
        clusters = []
        for named in cfg.clusters:
            body = copy.deepcopy(named.cluster.other_fields)
            if named.cluster.server:
                body["server"] = named.cluster.server
            clusters.append({"name": named.name, "cluster": body})
        out["clusters"] = clusters
    if cfg.users:
        out["users"] = [
            {"name": named.name, "user": copy.deepcopy(named.user)} for named in cfg.users
        ]
    if cfg.contexts:
        contexts = []
        for named in cfg.contexts:
            body = copy.deepcopy(named.context.other_fields)
            body["cluster"] = named.context.cluster
            body["user"] = named.context.user
            contexts.append({"name": named.name, "context": body})
        out["contexts"] = contexts
    if cfg.current_context:
        out["current-context"] = cfg.current_context
    return out
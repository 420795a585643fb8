"""Removing kind cluster entries from kubeconfig files."""

from __future__ import annotations

from kindkube.lock import locked
from kindkube.paths import paths
from kindkube.storage import read, write
from kindkube.types import Config, KubeconfigError, kind_cluster_key


def remove(cfg: Config, kind_cluster_name: str) -> bool:
    """Drop the kind cluster's entries from cfg; return True if anything changed."""
    key = kind_cluster_key(kind_cluster_name)
    before = (len(cfg.clusters), len(cfg.users), len(cfg.contexts))

    cfg.clusters = [c for c in cfg.clusters if c.name != key]
    cfg.users = [u for u in cfg.users if u.name != key]
    cfg.contexts = [c for c in cfg.contexts if c.name != key]
    mutated = before != (len(cfg.clusters), len(cfg.users), len(cfg.contexts))

    if cfg.current_context == key:
        cfg.current_context = ""
        mutated = True
    return mutated


def remove_kind(kind_cluster_name: str, explicit_path: str) -> None:
    """Remove the kind cluster from every kubeconfig file kubectl would consider."""
    for config_path in paths(explicit_path):
        try:
            lock = locked(config_path)
            lock.__enter__()
        except OSError as exc:
            raise KubeconfigError(f"failed to lock config file: {exc}") from exc
        try:
            try:
                existing = read(config_path)
            except KubeconfigError as exc:
                raise KubeconfigError(
                    f"failed to read kubeconfig to remove KIND entry: {exc}"
                ) from exc
            if remove(existing, kind_cluster_name):
                write(existing, config_path)
        finally:
            lock.__exit__(None, None, None)
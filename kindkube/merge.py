"""Merging a kind kubeconfig into an existing kubeconfig."""

from __future__ import annotations

from kindkube.lock import locked
from kindkube.paths import path_for_merge
from kindkube.storage import read, write
from kindkube.types import Config, KubeconfigError, check_kubeadm_expectations


def _upsert(entries: list, entry) -> None:
    replaced = False
    for position, existing in enumerate(entries):
        if existing.name == entry.name:
            entries[position] = entry
            replaced = True
    if not replaced:
        entries.append(entry)


def merge(existing: Config, kind: Config) -> None:
    """Merge the kind config's entries into existing, in place."""
    check_kubeadm_expectations(kind)

    _upsert(existing.clusters, kind.clusters[0])
    _upsert(existing.users, kind.users[0])
    _upsert(existing.contexts, kind.contexts[0])

    existing.current_context = kind.current_context

    # Some clients depend on apiVersion and kind being present.
    if not existing.other_fields:
        existing.other_fields = kind.other_fields


def write_merged(kind_config: Config, explicit_config_path: str) -> None:
    """Merge kind_config into the kubeconfig kubectl would merge into and save it.

    The current context is set to that of kind_config.
    """
    config_path = path_for_merge(explicit_config_path)
    try:
        lock = locked(config_path)
        lock.__enter__()
    except OSError as exc:
        raise KubeconfigError(f"failed to lock config file: {exc}") from exc
    try:
        try:
            existing = read(config_path)
        except KubeconfigError as exc:
            raise KubeconfigError(f"failed to get kubeconfig to merge: {exc}") from exc
        merge(existing, kind_config)
        write(existing, config_path)
    finally:
        lock.__exit__(None, None, None)
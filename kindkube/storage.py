"""Reading kubeconfig files from disk and writing them back."""

from __future__ import annotations

import os

from kindkube.encode import decode, encode
from kindkube.types import Config, KubeconfigError, check_kubeadm_expectations, kind_cluster_key


def kind_from_raw_kubeadm(raw_kubeadm_kubeconfig: str, cluster_name: str, server: str = "") -> Config:
    """Derive a kind kubeconfig from a raw kubeadm one.

    Every entry is renamed to the kind cluster key; the cluster's server is
    replaced when server is set.
    """
    cfg = decode(raw_kubeadm_kubeconfig)
    check_kubeadm_expectations(cfg)

    key = kind_cluster_key(cluster_name)
    cfg.clusters[0].name = key
    cfg.users[0].name = key
    cfg.contexts[0].name = key
    cfg.contexts[0].context.user = key
    cfg.contexts[0].context.cluster = key
    cfg.current_context = key

    if server:
        cfg.clusters[0].cluster.server = server
    return cfg


def read(config_path: str) -> Config:
    """Load the kubeconfig at config_path; a missing file gives an empty Config."""
    try:
        with open(config_path, "rb") as handle:
            raw = handle.read()
    except FileNotFoundError:
        return Config()
    except OSError as exc:
        raise KubeconfigError(f"failed to read {config_path}: {exc}") from exc
    return decode(raw)


def write(cfg: Config, config_path: str) -> None:
    """Write cfg to config_path, creating parent directories as needed."""
    encoded = encode(cfg).encode("utf-8")
    directory = os.path.dirname(config_path)
    if directory:
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        except OSError as exc:
            raise KubeconfigError(f"failed to create directory for KUBECONFIG: {exc}") from exc
    try:
        fd = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(encoded)
    except OSError as exc:
        raise KubeconfigError(f"failed to write KUBECONFIG: {exc}") from exc
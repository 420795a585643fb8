"""Kubeconfig management, YAML/TOML patching, load balancer config and log unpacking for local Kubernetes clusters."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "encode",
    "paths",
    "lock",
    "storage",
    "merge",
    "remove",
    "jsonpatch",
    "toml_patch",
    "kubeyaml",
    "loadbalancer",
    "logs",
]
"""Configuration for the external load balancer in front of the API servers."""

from __future__ import annotations

from dataclasses import dataclass, field

IMAGE = "kindest/haproxy:v20220207-ca68f7d4"
"""The load balancer image and tag."""

CONFIG_PATH = "/usr/local/etc/haproxy/haproxy.cfg"
"""Where the configuration file lives inside the image."""

_PREAMBLE = """\
# generated by kind
global
  log /dev/log local0
  log /dev/log local1 notice
  daemon

resolvers docker
  nameserver dns 127.0.0.11:53

defaults
  log global
  mode tcp
  option dontlognull
  # tune these
  timeout connect 5000
  timeout client 50000
  timeout server 50000
  # allow to boot despite dns don't resolve backends
  default-server init-addr none

frontend control-plane
"""

_BACKEND_HEADER = """\
  default_backend kube-apiservers

backend kube-apiservers
  option httpchk GET /healthz
  # we should be verifying (!)
  """


@dataclass
class ConfigData:
    """Values substituted into the load balancer configuration."""

    control_plane_port: int = 0
    backend_servers: dict[str, str] = field(default_factory=dict)
    ipv6: bool = False


def render_config(data: ConfigData) -> str:
    """Return the haproxy configuration for data.

    Backend servers are listed in order of their names.
    """
    port = data.control_plane_port
    family = "ipv6" if data.ipv6 else "ipv4"
    parts = [_PREAMBLE, f"  bind *:{port}\n"]
    parts.append(f"  bind :::{port};\n" if data.ipv6 else "  \n")
    parts.append(_BACKEND_HEADER)
    for name in sorted(data.backend_servers):
        address = data.backend_servers[name]
        parts.append(
            f"\n  server {name} {address} check check-ssl verify none"
            f" resolvers docker resolve-prefer {family}"
        )
    parts.append("\n")
    return "".join(parts)
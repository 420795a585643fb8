import pytest

from kindkube.loadbalancer import ConfigData, render_config


def _servers():
    return {
        "b-control-plane": "b-control-plane:6443",
        "a-control-plane": "a-control-plane:6443",
    }


def test_full_ipv4_config():
    out = render_config(ConfigData(control_plane_port=6443, backend_servers=_servers()))
    expected = "\n".join(
        [
            "# generated by kind",
            "global",
            "  log /dev/log local0",
            "  log /dev/log local1 notice",
            "  daemon",
            "",
            "resolvers docker",
            "  nameserver dns 127.0.0.11:53",
            "",
            "defaults",
            "  log global",
            "  mode tcp",
            "  option dontlognull",
            "  # tune these",
            "  timeout connect 5000",
            "  timeout client 50000",
            "  timeout server 50000",
            "  # allow to boot despite dns don't resolve backends",
            "  default-server init-addr none",
            "",
            "frontend control-plane",
            "  bind *:6443",
            "  ",
            "  default_backend kube-apiservers",
            "",
            "backend kube-apiservers",
            "  option httpchk GET /healthz",
            "  # we should be verifying (!)",
            "  ",
            "  server a-control-plane a-control-plane:6443 check check-ssl verify none"
            " resolvers docker resolve-prefer ipv4",
            "  server b-control-plane b-control-plane:6443 check check-ssl verify none"
            " resolvers docker resolve-prefer ipv4",
        ]
    ) + "\n"
    assert out == expected


def test_ipv6_binds_both_and_prefers_ipv6():
    out = render_config(ConfigData(control_plane_port=7000, backend_servers=_servers(), ipv6=True))
    lines = out.splitlines()
    bind_index = lines.index("  bind *:7000")
    assert lines[bind_index + 1] == "  bind :::7000;"
    assert lines[bind_index + 2] == "  default_backend kube-apiservers"
    server_lines = [line for line in lines if line.startswith("  server ")]
    assert len(server_lines) == 2
    assert all(line.endswith("resolve-prefer ipv6") for line in server_lines)


def test_ipv4_has_no_ipv6_bind():
    out = render_config(ConfigData(control_plane_port=7000, backend_servers=_servers()))
    assert ":::" not in out
    assert all(
        line.endswith("resolve-prefer ipv4")
        for line in out.splitlines()
        if line.startswith("  server ")
    )


@pytest.mark.parametrize("ipv6", [False, True])
def test_servers_sorted_by_name(ipv6):
    servers = {"zeta": "10.0.0.3:6443", "alpha": "10.0.0.1:6443", "mid": "10.0.0.2:6443"}
    out = render_config(ConfigData(control_plane_port=6443, backend_servers=servers, ipv6=ipv6))
    names = [line.split()[1] for line in out.splitlines() if line.startswith("  server ")]
    assert names == sorted(servers)
    addresses = [line.split()[2] for line in out.splitlines() if line.startswith("  server ")]
    assert addresses == [servers[name] for name in sorted(servers)]


def test_no_backend_servers():
    out = render_config(ConfigData(control_plane_port=6443))
    assert "  server " not in out
    assert out.endswith("  # we should be verifying (!)\n  \n")
    assert out.startswith("# generated by kind\n")
# kindkube

A library for the files around a local Kubernetes cluster. It manages the
cluster's kubeconfig entries, patches YAML and TOML configuration, renders
the control-plane load balancer configuration and unpacks log archives.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Kubeconfig files

The data model lives in `kindkube.types`. It defines `Config`,
`NamedCluster`, `Cluster`, `NamedUser`, `NamedContext` and `Context`. Any
field the model does not name is kept in an `other_fields` dictionary and
written back unchanged. `config_from_dict` and `config_to_dict` convert
between these objects and plain kubeconfig data. `kind_cluster_key(name)`
returns the entry name `kind-<name>`. `check_kubeadm_expectations(cfg)`
raises `KubeconfigError` unless the config has exactly one cluster, one user
and one context.

- `kindkube.encode.encode(cfg)` returns normalised YAML with sorted keys. An
  empty config gives `""`. `decode(raw)` parses the first YAML document into
  a `Config`. Timestamp-looking values stay strings.
- `kindkube.storage.kind_from_raw_kubeadm(raw, cluster_name, server="")`
  renames the cluster, user and context of a kubeadm admin kubeconfig to
  `kind-<cluster_name>` and makes that the current context. If `server` is
  given, it replaces the cluster's server.
- `kindkube.storage.read(path)` loads a file. A missing file gives an empty
  `Config`. `write(cfg, path)` creates the parent directories and writes the
  file with mode `0600`.
- `kindkube.merge.merge(existing, kind)` adds or replaces the kind entries in
  `existing` and sets its current context. `write_merged(config,
  explicit_path)` does the same on disk.
- `kindkube.remove.remove(cfg, cluster_name)` drops the cluster's entries and
  returns whether anything changed. `remove_kind(cluster_name,
  explicit_path)` does this for every file that kubectl would consider.
- `kindkube.paths` chooses files the way kubectl does. It takes the explicit
  path if one is given. Otherwise it takes the entries of `$KUBECONFIG`,
  without blanks or duplicates. Failing that, it takes `$HOME/.kube/config`;
  `home_dir` uses kubectl's Windows fallbacks. `path_for_merge` picks the
  first listed file that exists, or the last one.
- While a file changes, `kindkube.lock` holds a `<file>.lock` file next to
  it, as kubectl does. `locked(path)` is a context manager. If the lock
  already exists, `write_merged` and `remove_kind` raise `KubeconfigError`.

```python
from kindkube.storage import kind_from_raw_kubeadm
from kindkube.merge import write_merged

cfg = kind_from_raw_kubeadm(admin_conf_text, "kind", "https://127.0.0.1:6443")
write_merged(cfg, "")  # "" means: follow $KUBECONFIG, then $HOME
```

## Patching

- `kindkube.jsonpatch`:
  - `merge_patch(target, patch)` applies a JSON merge patch (RFC 7386).
  - `decode_patch(raw)` parses a JSON patch.
  - `apply_patch(document, operations)` applies RFC 6902 operations. The
    operations are `add`, `remove`, `replace`, `move`, `copy` and `test`.
  - Problems raise `JSONPatchError`.
- `kindkube.toml_patch.patch_toml(text, patches, patches6902)` applies the
  TOML merge patches first and the JSON 6902 patches second. It returns TOML
  with sorted keys and indented sub-tables, as produced by `dump_toml`.
  Problems raise `PatchError`.
- `kindkube.kubeyaml.kube_yaml(stream, patches, patches6902)` patches a
  multi-document YAML stream.
  - Merge patches are YAML documents.
  - JSON 6902 patches are `PatchJSON6902(group, version, kind, patch)`
    objects.
  - A patch applies to a document when their `kind` is the same and, if the
    patch sets an `apiVersion`, that matches too.
  - Each document comes back as YAML with sorted keys. Documents are joined
    by `---` lines.

```python
from kindkube.toml_patch import patch_toml

print(patch_toml('disabled_plugins = ["restart"]', ["disabled_plugins=[]"], []))
```

## Load balancer and logs

- `kindkube.loadbalancer.render_config(ConfigData(control_plane_port,
  backend_servers, ipv6))` returns the HAProxy configuration, with the
  backend servers sorted by name. `IMAGE` and `CONFIG_PATH` name the
  load balancer image and the path of its configuration file.
- `kindkube.logs.untar(stream, directory, logger=None)` extracts the regular
  files and directories of an uncompressed tar stream into `directory`. It
  logs a warning for any other kind of entry and reads the stream to its end.

## What it does not do

The package creates no clusters and does not talk to nodes or container
runtimes. Its input is the kubeconfig text, the tar stream or the documents
you hand it. It has no command-line program; use it as a library.
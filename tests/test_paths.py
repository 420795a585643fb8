import os

import pytest

from kindkube.paths import (
    discard_empty_and_duplicates,
    file_exists,
    home_dir,
    path_for_merge,
    paths,
)


def _env(values):
    return lambda name: values.get(name, "")


DUP_LIST = os.pathsep.join(["/foo", "/bar", "", "/foo", "/bar"])


def test_paths_explicit():
    result = paths("foo", _env({"KUBECONFIG": DUP_LIST, "HOME": "/home"}))
    assert result == ["foo"]


def test_paths_kubeconfig_list():
    result = paths("", _env({"KUBECONFIG": DUP_LIST, "HOME": "/home"}))
    assert result == ["/foo", "/bar"]


def test_paths_home():
    result = paths("", _env({"HOME": "/home"}))
    assert result == ["/home/.kube/config"]


@pytest.fixture
def fake_kubeconfigs(tmp_path):
    (tmp_path / "fake-home").mkdir()
    files = []
    for name in ("foo", "bar", "baz"):
        p = tmp_path / name
        p.touch()
        files.append(str(p))
    return files


def test_path_for_merge_explicit(fake_kubeconfigs):
    result = path_for_merge("foo", _env({"KUBECONFIG": DUP_LIST, "HOME": "/home"}))
    assert result == "foo"


def test_path_for_merge_kubeconfig_list(fake_kubeconfigs):
    result = path_for_merge("", _env({"KUBECONFIG": os.pathsep.join(fake_kubeconfigs)}))
    assert result == fake_kubeconfigs[0]


def test_path_for_merge_selects_last_if_none_exist():
    value = os.pathsep.join(["/bogus/path", "/bogus/path/two"])
    assert path_for_merge("", _env({"KUBECONFIG": value})) == "/bogus/path/two"


def test_path_for_merge_skips_missing(tmp_path):
    missing = str(tmp_path / "missing")
    present = tmp_path / "present"
    present.touch()
    value = os.pathsep.join([missing, str(present)])
    assert path_for_merge("", _env({"KUBECONFIG": value})) == str(present)


def test_home_dir_windows_with_kube_config(tmp_path):
    fake_home = tmp_path / "fake-home"
    (fake_home / ".kube").mkdir(parents=True)
    (fake_home / ".kube" / "config").touch()
    result = home_dir(
        "windows",
        _env(
            {
                "HOME": str(fake_home),
                "HOMEDRIVE": "ZZ:",
                "HOMEPATH": "ZZ:\\Users\\fake-user-zzz",
            }
        ),
    )
    assert result == str(fake_home)


def test_home_dir_windows_without_kube_config(tmp_path):
    fake_home = str(tmp_path)
    result = home_dir(
        "windows",
        _env(
            {
                "HOME": fake_home,
                "HOMEDRIVE": os.path.splitdrive(fake_home)[0],
                "HOMEPATH": "Users/fake-user-zzz",
            }
        ),
    )
    assert result == fake_home


def test_home_dir_windows_none_exist():
    result = home_dir(
        "windows",
        _env({"HOME": "Z:/faaaaake", "HOMEDRIVE": "Z:/", "HOMEPATH": "Users/fake-user-zzz"}),
    )
    assert result == "Z:/faaaaake"


def test_home_dir_windows_no_path():
    assert home_dir("windows", lambda name: "") == ""


def test_home_dir_non_windows_uses_home():
    assert home_dir("linux", _env({"HOME": "/home", "USERPROFILE": "/other"})) == "/home"


def test_discard_empty_and_duplicates():
    assert discard_empty_and_duplicates(["/foo", "/bar", "", "/foo", "/bar"]) == ["/foo", "/bar"]


def test_file_exists(tmp_path):
    f = tmp_path / "file"
    f.touch()
    assert file_exists(str(f)) is True
    assert file_exists(str(tmp_path)) is False
    assert file_exists(str(tmp_path / "missing")) is False
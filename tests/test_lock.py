import os

import pytest

from kindkube.lock import lock_file, lock_name, locked, unlock_file


def test_lock_name():
    assert lock_name("config") == "config.lock"
    assert lock_name("/tmp/kube/config") == "/tmp/kube/config.lock"


def test_lock_and_unlock(tmp_path):
    target = str(tmp_path / "config")
    lock_path = lock_name(target)
    lock_file(target)
    assert lock_path == str(tmp_path / "config.lock")
    assert os.path.isfile(lock_path)
    assert os.path.getsize(lock_path) == 0
    unlock_file(target)
    assert not os.path.exists(lock_path)
    # the lock can be taken again once released
    lock_file(target)
    assert os.path.isfile(lock_path)
    unlock_file(target)
    assert os.listdir(tmp_path) == []


def test_lock_twice_fails(tmp_path):
    target = str(tmp_path / "config")
    lock_file(target)
    with pytest.raises(FileExistsError):
        lock_file(target)
    unlock_file(target)
    assert not os.path.exists(lock_name(target))


def test_lock_creates_missing_directory(tmp_path):
    target = str(tmp_path / "a" / "b" / "config")
    lock_path = lock_name(target)
    lock_file(target)
    assert lock_path == str(tmp_path / "a" / "b" / "config.lock")
    assert os.path.isdir(str(tmp_path / "a" / "b"))
    assert os.listdir(str(tmp_path / "a" / "b")) == ["config.lock"]
    assert not os.path.exists(target)


def test_unlock_without_lock_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        unlock_file(str(tmp_path / "config"))


def test_locked_context_releases(tmp_path):
    target = str(tmp_path / "config")
    lock_path = lock_name(target)
    with locked(target):
        assert os.listdir(tmp_path) == ["config.lock"]
    assert lock_path == str(tmp_path / "config.lock")
    assert os.listdir(tmp_path) == []


def test_locked_context_releases_on_error(tmp_path):
    target = str(tmp_path / "config")
    lock_path = lock_name(target)
    assert lock_path == str(tmp_path / "config.lock")
    with pytest.raises(RuntimeError, match="boom"):
        with locked(target):
            assert os.path.isfile(lock_path)
            raise RuntimeError("boom")
    assert not os.path.exists(lock_path)
    assert os.listdir(tmp_path) == []
    # a fresh lock can be taken after the failed block
    lock_file(target)
    assert os.path.isfile(lock_name(target))
    assert os.listdir(tmp_path) == ["config.lock"]
    unlock_file(target)
    assert os.listdir(tmp_path) == []


def test_locked_context_blocks_second_holder(tmp_path):
    target = str(tmp_path / "config")
    with locked(target):
        with pytest.raises(FileExistsError):
            with locked(target):
                pass
        assert os.path.exists(lock_name(target))
    assert not os.path.exists(lock_name(target))
"""Locating kubeconfig files the way kubectl does."""

from __future__ import annotations

import os
import posixpath
import stat
import sys
from collections.abc import Callable, Iterable

KUBECONFIG_ENV = "KUBECONFIG"

_GOOS = "windows" if os.name == "nt" else sys.platform


def _getenv(name: str) -> str:
    return os.environ.get(name, "")


def paths(explicit_path: str, get_env: Callable[[str], str] | None = None) -> list[str]:
    """Return the kubeconfig files to consider.

    An explicit path wins; otherwise the entries of $KUBECONFIG; otherwise
    $HOME/.kube/config.
    """
    get_env = get_env or _getenv
    if explicit_path:
        return [explicit_path]
    listed = discard_empty_and_duplicates(get_env(KUBECONFIG_ENV).split(os.pathsep))
    if listed:
        return listed
    home = home_dir(_GOOS, get_env)
    return [posixpath.normpath(posixpath.join(home, ".kube", "config"))]


def path_for_merge(explicit_path: str, get_env: Callable[[str], str] | None = None) -> str:
    """Return the file kubectl would merge into: the first existing one, else the last."""
    candidates = paths(explicit_path, get_env)
    if len(candidates) == 1:
        return candidates[0]
    return next((p for p in candidates if file_exists(p)), candidates[-1])


def file_exists(filename: str) -> bool:
    """Return True if filename exists and is not a directory."""
    try:
        info = os.stat(filename)
    except OSError:
        return False
    return not stat.S_ISDIR(info.st_mode)


def discard_empty_and_duplicates(paths: Iterable[str]) -> list[str]:
    """Drop empty entries and repeats, keeping the first occurrence order."""
    return list(dict.fromkeys(p for p in paths if p))


def _windows_home(get_env: Callable[[str], str]) -> str:
    home = get_env("HOME")
    home_drive, home_path = get_env("HOMEDRIVE"), get_env("HOMEPATH")
    drive_path = home_drive + home_path if home_drive and home_path else ""
    user_profile = get_env("USERPROFILE")

    for candidate in (home, drive_path, user_profile):
        if candidate and os.path.exists(os.path.join(candidate, ".kube", "config")):
            return candidate

    first_set = ""
    first_existing = ""
    for candidate in (home, user_profile, drive_path):
        if not candidate:
            continue
        first_set = first_set or candidate
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        first_existing = first_existing or candidate
        if stat.S_ISDIR(info.st_mode) and info.st_mode & stat.S_IWUSR:
            return candidate

    return first_existing or first_set


def home_dir(goos: str, get_env: Callable[[str], str] | None = None) -> str:
    """Return the user's home directory, with the Windows fallbacks kubectl uses."""
    get_env = get_env or _getenv
    if goos == "windows":
        return _windows_home(get_env)
    return get_env("HOME")
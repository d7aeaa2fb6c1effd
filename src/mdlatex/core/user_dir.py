"""Centralised resolution of the mdlatex cache directory."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from threading import RLock


__all__ = [
    "CACHE_DIR_ENV",
    "CONVERSIONS_NAMESPACE",
    "MdlatexUserDir",
    "configure_user_dir",
    "get_user_dir",
    "set_user_dir",
]

CACHE_DIR_ENV = "MDLATEX_CACHE_DIR"
CONVERSIONS_NAMESPACE = "conversions"

_USER_DIR: MdlatexUserDir | None = None
_LOCK: RLock = RLock()


def _resolve_cache_root(cache_root: str | Path | None) -> tuple[Path, bool]:
    if cache_root is not None:
        return Path(cache_root).expanduser(), True
    env_cache = os.environ.get(CACHE_DIR_ENV)
    if env_cache:
        return Path(env_cache).expanduser(), True
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / "mdlatex", True
    return Path.home() / ".cache" / "mdlatex", False


@dataclass(slots=True)
class MdlatexUserDir:
    """Resolved cache root."""

    cache_root: Path
    cache_is_explicit: bool = False

    def cache_dir(self, *parts: str | Path, create: bool = True) -> Path:
        """Return a directory under the cache root, creating it when requested."""
        target = self.cache_root.joinpath(*parts)
        if create:
            target.mkdir(parents=True, exist_ok=True)
        return target


def configure_user_dir(*, cache_root: str | Path | None = None) -> MdlatexUserDir:
    """Replace the global user dir singleton with a freshly resolved instance."""
    resolved, explicit = _resolve_cache_root(cache_root)
    return set_user_dir(MdlatexUserDir(cache_root=resolved, cache_is_explicit=explicit))


def get_user_dir() -> MdlatexUserDir:
    """Return the lazily created user dir singleton.

    An implicit root is resolved again when the environment changed since the
    singleton was built.
    """
    global _USER_DIR
    with _LOCK:
        if _USER_DIR is None:
            return configure_user_dir()
        if not _USER_DIR.cache_is_explicit:
            current, explicit = _resolve_cache_root(None)
            if current != _USER_DIR.cache_root:
                _USER_DIR = MdlatexUserDir(cache_root=current, cache_is_explicit=explicit)
        return _USER_DIR


def set_user_dir(user_dir: MdlatexUserDir) -> MdlatexUserDir:
    """Replace the current user dir singleton and return it."""
    global _USER_DIR
    with _LOCK:
        _USER_DIR = user_dir
        return _USER_DIR

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .paths import config_root as _config_root_base, state_root as _state_root_base

DEFAULT_VOLUME_NAME = "openfoam"
DEFAULT_VOLUME_SIZE = 10
DEFAULT_DAEMON_DIR = "/Library/LaunchDaemons"
DEFAULT_LABEL_PREFIX = "org.openfoam.dmgctl"
DEFAULT_HDIUTIL = "/usr/bin/hdiutil"

# ---------- Global config file ----------


def global_config_search_paths() -> list[Path]:
    """Return the ordered list of paths that will be checked for global config.

    - If DMGCTL_CONFIG_FILE is set, only that single path is considered.
    - Otherwise, check in order:
        1) ${XDG_CONFIG_HOME:-~/.config}/dmgctl/config.yml
        2) the platform config dir (DMGCTL_CONFIG_DIR or platformdirs)
        3) sys.prefix/etc/dmgctl/config.yml
        4) /etc/dmgctl/config.yml
    """
    env_file = os.environ.get("DMGCTL_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    user_cfg = (Path(xdg_home) if xdg_home else Path.home() / ".config") / "dmgctl" / "config.yml"
    platform_cfg = _config_root_base() / "config.yml"
    sp_cfg = Path(sys.prefix) / "etc" / "dmgctl" / "config.yml"
    etc_cfg = Path("/etc/dmgctl/config.yml")

    paths = [user_cfg]
    if platform_cfg != user_cfg:
        paths.append(platform_cfg)
    paths.extend([sp_cfg, etc_cfg])
    return paths


def global_config_path() -> Path:
    """Global config file path (first existing search path wins).

    An explicit DMGCTL_CONFIG_FILE is returned even if missing so the intent
    stays visible to the user. If nothing exists, the last candidate
    (/etc/dmgctl/config.yml) is returned.
    """
    candidates = global_config_search_paths()
    if len(candidates) == 1:
        return candidates[0]

    for c in candidates:
        if c.is_file():
            return c.resolve()
    return candidates[-1]


def load_global_config() -> dict[str, Any]:
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return data if isinstance(data, dict) else {}


def get_global_section(key: str) -> dict[str, Any]:
    """Return a top-level section from the global config, defaulting to ``{}``.

    If the value under *key* is not a dict (e.g. ``volume: "oops"``), returns
    ``{}`` so callers can keep using ``.get()``.
    """
    try:
        cfg = load_global_config()
    except (OSError, yaml.YAMLError):
        return {}
    value = cfg.get(key, {})
    if not isinstance(value, dict):
        return {}
    return value or {}


# ---------- Path resolution ----------


def _resolve_path(
    env_var: str | None,
    config_key: tuple[str, str] | None,
    default: Callable[[], Path],
) -> Path:
    """Resolve a path: env var → global config → computed default."""
    if env_var:
        env = os.environ.get(env_var)
        if env:
            return Path(env).expanduser().absolute()

    if config_key:
        val = get_global_section(config_key[0]).get(config_key[1])
        if val:
            return Path(str(val)).expanduser().absolute()

    return default().absolute()


def state_root() -> Path:
    """Writable state directory (debug log).

    Precedence: DMGCTL_STATE_DIR, then ``paths.state_root``, then the
    platformdirs user data dir.
    """
    return _resolve_path("DMGCTL_STATE_DIR", ("paths", "state_root"), _state_root_base)


def image_dir() -> Path:
    """Directory that holds the backing ``.<volume>.dmg.sparseimage`` files.

    Precedence: ``paths.image_dir`` from the global config, then the home directory.
    """
    return _resolve_path(None, ("paths", "image_dir"), Path.home)


def default_mount_dir(volume_name: str) -> Path:
    """Mount directory used when ``-dir`` is not given.

    ``volume.dir`` from the global config wins; otherwise ``<home>/<volume>``.
    """
    return _resolve_path(None, ("volume", "dir"), lambda: Path.home() / volume_name)


# ---------- Scalar settings ----------


def default_volume_name() -> str:
    """Return ``volume.name`` from the global config or ``openfoam``."""
    name = get_global_section("volume").get("name")
    return str(name) if name else DEFAULT_VOLUME_NAME


def default_volume_size() -> int:
    """Return ``volume.size`` (GB) from the global config or 10.

    A malformed value falls back to the built-in default; the CLI validates
    whatever value it ends up using.
    """
    size = get_global_section("volume").get("size", DEFAULT_VOLUME_SIZE)
    try:
        return int(size)
    except (TypeError, ValueError):
        return DEFAULT_VOLUME_SIZE


def daemon_dir() -> Path:
    """System directory that receives the launchd descriptor."""
    return _resolve_path(None, ("daemon", "dir"), lambda: Path(DEFAULT_DAEMON_DIR))


def daemon_label_prefix() -> str:
    """Return ``daemon.label_prefix`` or the built-in prefix."""
    return str(get_global_section("daemon").get("label_prefix") or DEFAULT_LABEL_PREFIX)


def hdiutil_path() -> str:
    """Return the disk image utility executable (``tools.hdiutil``)."""
    return str(get_global_section("tools").get("hdiutil") or DEFAULT_HDIUTIL)

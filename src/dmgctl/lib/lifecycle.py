# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Volume lifecycle operations.

A volume is ``absent`` (no image file), ``created-detached`` or
``attached``. The state is never cached: it is derived from the image file and
the live ``hdiutil info`` table on every call.
"""

from collections.abc import Callable
from enum import Enum
from pathlib import Path

from ._util.fs import ensure_dir_writable, is_empty_dir
from ._util.logging_utils import _log_debug
from .core.volume import Volume, VolumeState, parse_size
from .daemon import DaemonInstaller, daemon_descriptor_path, render_descriptor
from .errors import UsageError
from .images import DiskImageTool


class Command(str, Enum):
    CREATE = "create"
    AUTOMOUNT = "automount"
    MOUNT = "mount"
    UNMOUNT = "unmount"
    COMPACT = "compact"
    DELETE = "delete"
    STATUS = "status"


COMMAND_ALIASES: dict[str, Command] = {
    "attach": Command.MOUNT,
    "detach": Command.UNMOUNT,
}


def parse_command(name: str) -> Command:
    """Map a CLI command word (or alias) to a :class:`Command`."""
    if name in COMMAND_ALIASES:
        return COMMAND_ALIASES[name]
    try:
        return Command(name)
    except ValueError:
        raise UsageError(f"Unknown command: {name}") from None


# ---------- State query ----------


def _derive_state(volume: Volume, identifier: str | None) -> VolumeState:
    if identifier:
        return VolumeState.ATTACHED
    if volume.image_path.exists():
        return VolumeState.DETACHED
    return VolumeState.ABSENT


def volume_state(volume: Volume, tool: DiskImageTool) -> VolumeState:
    return _derive_state(volume, tool.mounted_identifier(volume.mount_dir))


# ---------- Operations ----------


def volume_create(volume: Volume, tool: DiskImageTool) -> None:
    size_gb = parse_size(volume.size_gb)
    print(f"==> Creating {size_gb}GB case-sensitive volume '{volume.name}'")
    print(f"    image: {volume.image_path}")
    tool.create(volume.image_base, size_gb, volume.name)


def volume_attach(volume: Volume, tool: DiskImageTool, *, make_run_dir: bool = True) -> None:
    """Attach *volume* at its mount directory.

    The directory must be absent or empty. A ``run`` subdirectory is created
    inside the mounted volume unless *make_run_dir* is False.
    """
    mount_dir = volume.mount_dir
    if tool.mounted_identifier(mount_dir):
        raise UsageError(f"Volume already mounted at {mount_dir}")
    if mount_dir.exists():
        if not mount_dir.is_dir():
            raise UsageError(f"Mount point is not a directory: {mount_dir}")
        if not is_empty_dir(mount_dir):
            raise UsageError(f"Mount directory is not empty: {mount_dir}")
    else:
        ensure_dir_writable(mount_dir, "mount")

    print(f"==> Attaching {volume.image_path} at {mount_dir}")
    tool.attach(volume.image_path, mount_dir)

    if make_run_dir:
        ensure_dir_writable(volume.run_dir, "run")
        _log_debug(f"attach: ensured {volume.run_dir}")


def volume_detach(volume: Volume, tool: DiskImageTool) -> None:
    identifier = tool.mounted_identifier(volume.mount_dir)
    if not identifier:
        raise UsageError(f"No volume mounted at {volume.mount_dir}")
    print(f"==> Detaching {identifier} from {volume.mount_dir}")
    tool.detach(identifier)


def volume_compact(volume: Volume, tool: DiskImageTool, *, make_run_dir: bool = True) -> None:
    """Detach, compact and re-attach *volume*.

    A failed compaction is fatal and leaves the volume detached.
    """
    volume_detach(volume, tool)
    print(f"==> Compacting {volume.image_path}")
    tool.compact(volume.image_path)
    volume_attach(volume, tool, make_run_dir=make_run_dir)


def volume_automount(
    volume: Volume,
    tool: DiskImageTool,
    installer: DaemonInstaller,
    *,
    make_run_dir: bool = True,
) -> Path:
    """Attach *volume* if needed and register it for attach at every boot.

    Returns the installed descriptor path.
    """
    if not tool.mounted_identifier(volume.mount_dir):
        volume_attach(volume, tool, make_run_dir=make_run_dir)
    else:
        print(f"==> Volume already mounted at {volume.mount_dir}")

    target = daemon_descriptor_path(volume)
    print(f"==> Installing {target} (requires administrator privileges)")
    installer.install(render_descriptor(volume), target)
    return target


def volume_delete(
    volume: Volume,
    tool: DiskImageTool,
    confirm: Callable[[str], bool],
) -> bool:
    """Detach *volume* and remove its image after confirmation.

    Returns False (and does nothing) when the user declines.
    """
    question = (
        f"Delete volume '{volume.name}' and its image {volume.image_path}? "
        "All data on it will be lost."
    )
    if not confirm(question):
        print("==> Not deleted.")
        return False

    volume_detach(volume, tool)
    print(f"==> Removing {volume.image_path}")
    try:
        volume.image_path.unlink()
    except FileNotFoundError:
        raise UsageError(f"Image file not found: {volume.image_path}") from None
    except OSError as e:
        raise UsageError(f"Cannot remove {volume.image_path}: {e.strerror or e}") from None
    _log_debug(f"delete: removed {volume.image_path}")
    return True


def volume_status(volume: Volume, tool: DiskImageTool) -> dict[str, str | None]:
    identifier = tool.mounted_identifier(volume.mount_dir)
    state = _derive_state(volume, identifier)
    return {
        "volume": volume.name,
        "state": state.value,
        "image": str(volume.image_path),
        "mount_dir": str(volume.mount_dir),
        "device": identifier,
    }


# ---------- Dispatch ----------


def run_command(
    command: Command,
    volume: Volume,
    *,
    tool: DiskImageTool | None = None,
    installer: DaemonInstaller | None = None,
    make_run_dir: bool = True,
    confirm: Callable[[str], bool] | None = None,
) -> None:
    """Run exactly one *command* against *volume*."""
    tool = tool if tool is not None else DiskImageTool()
    _log_debug(f"command: {command.value} volume={volume.name} dir={volume.mount_dir}")

    if command is Command.CREATE:
        volume_create(volume, tool)
    elif command is Command.MOUNT:
        volume_attach(volume, tool, make_run_dir=make_run_dir)
    elif command is Command.UNMOUNT:
        volume_detach(volume, tool)
    elif command is Command.COMPACT:
        volume_compact(volume, tool, make_run_dir=make_run_dir)
    elif command is Command.AUTOMOUNT:
        volume_automount(
            volume,
            tool,
            installer if installer is not None else DaemonInstaller(),
            make_run_dir=make_run_dir,
        )
    elif command is Command.DELETE:
        if confirm is None:
            from ..ui_utils.terminal import confirm as _confirm

            confirm = _confirm
        volume_delete(volume, tool, confirm)
    elif command is Command.STATUS:
        info = volume_status(volume, tool)
        for key, value in info.items():
            print(f"{key}: {value if value is not None else '-'}")
    else:
        raise UsageError(f"Unknown command: {command}")

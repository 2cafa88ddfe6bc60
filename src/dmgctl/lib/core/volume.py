# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Volume model: name and size validation plus path resolution."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import UsageError
from .config import (
    default_mount_dir,
    default_volume_name,
    default_volume_size,
    image_dir,
)

MIN_SIZE_GB = 2
IMAGE_SUFFIX = ".dmg.sparseimage"


class VolumeState(str, Enum):
    ABSENT = "absent"
    DETACHED = "created-detached"
    ATTACHED = "attached"


@dataclass(frozen=True)
class Volume:
    """A named, sized case-sensitive volume and where it lives on the host."""

    name: str
    size_gb: int
    image_path: Path
    mount_dir: Path

    @property
    def image_base(self) -> Path:
        """Image path without the ``.sparseimage`` suffix hdiutil appends on create."""
        return self.image_path.with_suffix("")

    @property
    def run_dir(self) -> Path:
        return self.mount_dir / "run"


def validate_volume_name(name: str) -> str:
    """Return *name* if usable as a volume and file name component, else raise UsageError."""
    if not name:
        raise UsageError("Volume name cannot be empty")
    if "/" in name or name.startswith((".", "-")):
        raise UsageError(f"Invalid volume name: {name!r}")
    return name


def parse_size(value: str | int) -> int:
    """Parse a size in whole gigabytes; at least ``MIN_SIZE_GB``."""
    try:
        size = int(str(value).strip())
    except ValueError:
        raise UsageError(f"Size must be an integer number of GB: {value!r}") from None
    if size < MIN_SIZE_GB:
        raise UsageError(f"Size must be at least {MIN_SIZE_GB} GB: {size}")
    return size


def image_path_for(name: str) -> Path:
    return image_dir() / f".{name}{IMAGE_SUFFIX}"


def resolve_volume(
    name: str | None = None,
    size: str | int | None = None,
    mount_dir: str | Path | None = None,
) -> Volume:
    """Build a :class:`Volume` from CLI overrides, falling back to config defaults.

    ``volume.dir`` from the config only applies to the configured volume name;
    any other volume mounts at ``<home>/<name>`` unless *mount_dir* is given.

    Raises UsageError for an invalid name or an invalid explicit *size*. A size
    taken from the config is checked by :func:`volume_create`, the only
    operation that uses it.
    """
    configured_name = default_volume_name()
    name = validate_volume_name(name if name is not None else configured_name)
    size_gb = parse_size(size) if size is not None else default_volume_size()
    if mount_dir is not None:
        directory = Path(mount_dir).expanduser().absolute()
    elif name == configured_name:
        directory = default_mount_dir(name)
    else:
        directory = (Path.home() / name).absolute()
    return Volume(name=name, size_gb=size_gb, image_path=image_path_for(name), mount_dir=directory)


def list_volume_names() -> list[str]:
    """Names of volumes whose backing image exists in ``image_dir()``."""
    directory = image_dir()
    try:
        images = sorted(directory.glob(f".*{IMAGE_SUFFIX}"))
    except OSError:
        return []
    return [p.name[1 : -len(IMAGE_SUFFIX)] for p in images if p.is_file()]

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Thin wrapper around the macOS ``hdiutil`` disk image utility.

Each method maps to one ``hdiutil`` verb. Mutating verbs inherit the
terminal so their diagnostics reach the user unmodified; only the ``info``
query captures output.
"""

import os
import plistlib
import subprocess
from collections.abc import Sequence
from pathlib import Path
from xml.parsers.expat import ExpatError

from ._util.logging_utils import _log_debug
from .core.config import hdiutil_path
from .errors import ExternalCommandFailure

CASE_SENSITIVE_FS = "Case-sensitive Journaled HFS+"
INFO_TIMEOUT_SEC = 30


def run_checked(argv: Sequence[str]) -> None:
    """Run *argv* attached to the terminal; raise ExternalCommandFailure on failure."""
    argv = [str(a) for a in argv]
    _log_debug(f"run: {' '.join(argv)} (start)")
    try:
        result = subprocess.run(argv, check=False)
    except FileNotFoundError:
        _log_debug(f"run: {argv[0]} not found")
        raise ExternalCommandFailure(argv, None, f"{argv[0]} not found") from None
    _log_debug(f"run: {' '.join(argv)} (exit {result.returncode})")
    if result.returncode != 0:
        raise ExternalCommandFailure(argv, result.returncode)


def _same_path(a: str, b: Path) -> bool:
    # hdiutil reports resolved mount points (/tmp is /private/tmp on macOS).
    return os.path.realpath(a) == os.path.realpath(str(b))


class DiskImageTool:
    """Capability object for the disk image lifecycle.

    Volume operations only talk to this interface, so tests substitute a fake.
    """

    def __init__(self, executable: str | None = None):
        self.executable = executable or hdiutil_path()

    def _argv(self, *args: object) -> list[str]:
        return [self.executable, *(str(a) for a in args)]

    def create(self, image_base: Path, size_gb: int, volume_name: str) -> None:
        """Create a sparse case-sensitive image; hdiutil appends ``.sparseimage``."""
        run_checked(
            self._argv(
                "create",
                "-size",
                f"{size_gb}g",
                "-type",
                "SPARSE",
                "-fs",
                CASE_SENSITIVE_FS,
                "-volname",
                volume_name,
                image_base,
            )
        )

    def attach(self, image_path: Path, mount_dir: Path) -> None:
        run_checked(self._argv("attach", "-nobrowse", "-mountpoint", mount_dir, image_path))

    def detach(self, identifier: str) -> None:
        run_checked(self._argv("detach", identifier))

    def compact(self, image_path: Path) -> None:
        run_checked(self._argv("compact", image_path, "-batteryallowed"))

    def mounted_identifier(self, mount_dir: Path) -> str | None:
        """Return the device entry mounted at *mount_dir*, or None if nothing is.

        Parses ``hdiutil info -plist``. A failing query is an external failure,
        not "not mounted".
        """
        argv = self._argv("info", "-plist")
        try:
            out = subprocess.check_output(argv, stderr=subprocess.DEVNULL, timeout=INFO_TIMEOUT_SEC)
        except FileNotFoundError:
            raise ExternalCommandFailure(argv, None, f"{self.executable} not found") from None
        except subprocess.CalledProcessError as e:
            raise ExternalCommandFailure(argv, e.returncode) from None
        except subprocess.TimeoutExpired:
            raise ExternalCommandFailure(argv, None, "timed out") from None

        try:
            info = plistlib.loads(out)
        except (ValueError, ExpatError) as e:
            raise ExternalCommandFailure(argv, 0, f"unreadable output ({e})") from None

        for image in info.get("images", []):
            for entity in image.get("system-entities", []):
                mount_point = entity.get("mount-point")
                if mount_point and _same_path(mount_point, mount_dir):
                    return entity.get("dev-entry")
        return None

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Boot-time attach via a launchd daemon descriptor."""

import tempfile
from importlib import resources
from pathlib import Path

from ._util.logging_utils import _log_debug
from ._util.template_utils import render_template
from .core.config import daemon_dir, daemon_label_prefix, hdiutil_path
from .core.volume import Volume
from .images import run_checked

TEMPLATE_NAME = "launchd-mount.plist.template"


def daemon_label(volume: Volume) -> str:
    return f"{daemon_label_prefix()}.{volume.name}"


def daemon_descriptor_path(volume: Volume) -> Path:
    """Where the descriptor for *volume* is installed."""
    return daemon_dir() / f"{daemon_label(volume)}.plist"


def render_descriptor(volume: Volume) -> str:
    """Return the launchd plist that attaches *volume* at its mount directory."""
    template = resources.files("dmgctl") / "resources" / "templates" / TEMPLATE_NAME
    return render_template(
        template,
        {
            "LABEL": daemon_label(volume),
            "HDIUTIL": hdiutil_path(),
            "MOUNT_DIR": volume.mount_dir,
            "IMAGE_PATH": volume.image_path,
        },
        xml=True,
    )


class DaemonInstaller:
    """Installs descriptors into the system daemon directory with ``sudo cp``."""

    def __init__(self, copy_command: tuple[str, ...] = ("sudo", "cp")):
        self.copy_command = copy_command

    def install(self, content: str, target: Path) -> None:
        with tempfile.TemporaryDirectory(prefix="dmgctl-") as td:
            staged = Path(td) / target.name
            staged.write_text(content, encoding="utf-8")
            _log_debug(f"daemon: installing {target}")
            run_checked([*self.copy_command, str(staged), str(target)])

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Platform-aware path resolution for config and state directories."""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "dmgctl"


def config_root() -> Path:
    """
    Base directory for configuration.

    Priority:
      1. DMGCTL_CONFIG_DIR
      2. platformdirs user config dir (~/Library/Application Support/dmgctl on macOS)
    """
    env = os.getenv("DMGCTL_CONFIG_DIR")
    if env:
        return Path(env).expanduser()
    return Path(user_config_dir(APP_NAME))


def state_root() -> Path:
    """
    Writable state (debug log, rendered descriptors).

    Priority:
      1. DMGCTL_STATE_DIR
      2. platformdirs user data dir
    """
    env = os.getenv("DMGCTL_STATE_DIR")
    if env:
        return Path(env).expanduser()
    return Path(user_data_dir(APP_NAME))

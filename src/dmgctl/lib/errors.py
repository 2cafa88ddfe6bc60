# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Error types raised by the volume operations.

Only two kinds exist. The CLI maps both to exit status 1.
"""

import os
from collections.abc import Sequence


class DmgctlError(Exception):
    """Base class for all dmgctl errors."""


class UsageError(DmgctlError):
    """Bad arguments or a violated volume precondition.

    Reported together with the command usage line.
    """


class ExternalCommandFailure(DmgctlError):
    """A delegated utility exited non-zero or could not be started.

    The utility's own output is not captured, so it has already reached the
    terminal by the time this is raised.
    """

    def __init__(self, argv: Sequence[str], returncode: int | None, reason: str | None = None):
        self.argv = list(argv)
        self.returncode = returncode
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        if not self.argv:
            cmd = "command"
        else:
            cmd = " ".join([os.path.basename(self.argv[0]), *self.argv[1:2]])
        if self.reason:
            return f"{cmd} failed: {self.reason}"
        return f"{cmd} failed with exit status {self.returncode}"

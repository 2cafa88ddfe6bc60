# SPDX-FileCopyrightText: 2026 Jiri Vyskocil
# SPDX-License-Identifier: Apache-2.0

"""Minimal template rendering via ``{{VAR}}`` token replacement."""

from importlib.resources.abc import Traversable
from pathlib import Path
from xml.sax.saxutils import escape


def render_template(
    template_path: Path | Traversable, variables: dict, *, xml: bool = False
) -> str:
    """Read *template_path* and replace ``{{KEY}}`` tokens with *variables* values.

    With *xml* set, values are escaped for use inside XML character data.
    """
    content = template_path.read_text()
    for k, v in variables.items():
        value = escape(str(v)) if xml else str(v)
        content = content.replace(f"{{{{{k}}}}}", value)
    return content

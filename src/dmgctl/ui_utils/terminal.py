"""Terminal helpers: colors and the interactive confirmation prompt.

Core color functions live in ``dmgctl.lib._util.ansi`` so that library
modules can use them without depending on this presentation module.
"""

from dmgctl.lib._util.ansi import (  # noqa: F401  -- re-exports
    red,
    supports_color,
)

AFFIRMATIVE = ("y", "yes")


def is_affirmative(answer: str | None) -> bool:
    """True for ``y``/``yes`` in any letter case, surrounding whitespace ignored."""
    return (answer or "").strip().lower() in AFFIRMATIVE


def confirm(question: str) -> bool:
    """Ask *question* on stdin; anything but y/yes (including EOF) declines."""
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        print()
        return False
    return is_affirmative(answer)

from pathlib import Path

from ..errors import UsageError


def ensure_dir(path: Path) -> None:
    """Create a directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)


def ensure_dir_writable(path: Path, label: str) -> None:
    """Like :func:`ensure_dir`, but report OS errors as a UsageError naming *label*."""
    try:
        ensure_dir(path)
    except OSError as e:
        raise UsageError(f"Cannot create {label} directory {path}: {e.strerror or e}") from None


def is_empty_dir(path: Path) -> bool:
    """Return True if *path* is a directory with no entries (hidden ones included)."""
    return path.is_dir() and next(path.iterdir(), None) is None

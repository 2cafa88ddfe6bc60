"""Utility functions for logging."""


def _log_debug(message: str) -> None:
    """Append a timestamped debug line to ``state_root()/dmgctl.log``.

    Best-effort: any IO error is ignored so the log never changes the
    outcome of a volume command.
    """
    try:
        import time

        from ..core.config import state_root

        log_path = state_root() / "dmgctl.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {message}\n")
    except Exception:
        pass

"""dmgctl package.

Modules:
- dmgctl.cli: CLI entry point package (dmgctl)
- dmgctl.lib.core: Configuration, paths, volume model, version
- dmgctl.lib.images: hdiutil wrapper
- dmgctl.lib.daemon: launchd descriptor install
- dmgctl.lib.lifecycle: Volume operations and dispatch
- dmgctl.ui_utils: Terminal colors and prompts
"""

__all__ = [
    "cli",
    "lib",
    "ui_utils",
]

# Version information - single source of truth using importlib.metadata
try:
    from importlib.metadata import version

    __version__ = version("dmgctl")
except Exception:
    # Fallback for development mode when package is not installed
    try:
        import tomllib
        from pathlib import Path

        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                pyproject_data = tomllib.load(f)
                __version__ = pyproject_data["tool"]["poetry"]["version"]
        else:
            __version__ = "unknown"
    except Exception:
        __version__ = "unknown"

#!/usr/bin/env python3

import argparse
import sys

import argcomplete

from ..lib.core.version import format_version_string, get_version_info
from ..lib.core.volume import list_volume_names, parse_size, resolve_volume
from ..lib.errors import ExternalCommandFailure, UsageError
from ..lib.lifecycle import COMMAND_ALIASES, Command, parse_command, run_command
from ..ui_utils.terminal import red as _red, supports_color as _supports_color

COMMAND_CHOICES = [c.value for c in Command] + list(COMMAND_ALIASES)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _size_arg(value: str) -> int:
    try:
        return parse_size(value)
    except UsageError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _complete_volume_names(
    prefix: str, parsed_args, **kwargs
):  # pragma: no cover - shell integration
    try:
        names = list_volume_names()
    except Exception:
        return []
    return [n for n in names if n.startswith(prefix)]


def build_parser() -> _ArgumentParser:
    version, revision = get_version_info()
    parser = _ArgumentParser(
        prog="dmgctl",
        description="dmgctl – manage a case-sensitive disk image volume for container builds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        epilog=(
            "Commands:\n"
            "  create     create the sparse case-sensitive image\n"
            "  mount      attach the image at the mount directory (alias: attach)\n"
            "  unmount    detach the image (alias: detach)\n"
            "  compact    detach, compact and re-attach the image\n"
            "  automount  mount and install a launchd daemon that mounts at boot\n"
            "  delete     detach and remove the image (asks for confirmation)\n"
            "  status     show whether the volume exists and is mounted\n"
            "\n"
            "Defaults: volume 'openfoam', 10 GB, image ~/.<volume>.dmg.sparseimage,\n"
            "mounted at ~/<volume>. Override them in ~/.config/dmgctl/config.yml."
        ),
    )
    parser.add_argument(
        "-d", "-dir", dest="dir", metavar="DIR", help="Mount directory (default: ~/<volume>)"
    )
    parser.add_argument(
        "-h", "-help", dest="help", action="store_true", help="Show this help and exit"
    )
    parser.add_argument(
        "-n",
        "-no-run",
        dest="no_run",
        action="store_true",
        help="Do not create the 'run' directory inside the mounted volume",
    )
    parser.add_argument(
        "-s",
        "-size",
        dest="size",
        type=_size_arg,
        metavar="GB",
        help="Volume size in GB, at least 2 (default: 10)",
    )
    _a = parser.add_argument(
        "-v", "-volume", dest="volume", metavar="NAME", help="Volume name (default: openfoam)"
    )
    _a.completer = _complete_volume_names  # type: ignore[attr-defined]
    parser.add_argument(
        "-y",
        "-yes",
        dest="assume_yes",
        action="store_true",
        help="Answer 'yes' to the delete confirmation",
    )
    parser.add_argument(
        "-V",
        "-version",
        action="version",
        version=f"dmgctl {format_version_string(version, revision)}",
    )
    parser.add_argument("command", nargs="?", choices=COMMAND_CHOICES, metavar="COMMAND")
    return parser


def _report_error(message: str) -> None:
    print(_red(f"Error: {message}", _supports_color(sys.stderr)), file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argcomplete.autocomplete(parser)  # pragma: no cover - shell integration
    args = parser.parse_args(argv)

    if args.help:
        parser.print_help()
        raise SystemExit(1)
    if not args.command:
        parser.error("a command is required")

    try:
        command = parse_command(args.command)
        volume = resolve_volume(args.volume, args.size, args.dir)
        run_command(
            command,
            volume,
            make_run_dir=not args.no_run,
            confirm=(lambda _question: True) if args.assume_yes else None,
        )
    except UsageError as e:
        parser.error(str(e))
    except ExternalCommandFailure as e:
        _report_error(str(e))
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()

import plistlib
import subprocess
import unittest
import unittest.mock
from pathlib import Path

from dmgctl.lib.core.volume import resolve_volume
from dmgctl.lib.daemon import (
    DaemonInstaller,
    daemon_descriptor_path,
    daemon_label,
    render_descriptor,
)
from dmgctl.lib.errors import ExternalCommandFailure
from test_utils import home_env


class DaemonDescriptorTests(unittest.TestCase):
    def test_descriptor_program_arguments(self) -> None:
        with home_env() as env:
            volume = resolve_volume()
            data = plistlib.loads(render_descriptor(volume).encode("utf-8"))

        self.assertEqual(data["Label"], "org.openfoam.dmgctl.openfoam")
        self.assertTrue(data["RunAtLoad"])
        self.assertEqual(
            data["ProgramArguments"],
            [
                "/usr/bin/hdiutil",
                "attach",
                "-notremovable",
                "-nobrowse",
                "-mountpoint",
                str(env.home / "openfoam"),
                str(env.home / ".openfoam.dmg.sparseimage"),
            ],
        )

    def test_descriptor_escapes_paths(self) -> None:
        with home_env():
            volume = resolve_volume(mount_dir="/tmp/R&D <build>")
            data = plistlib.loads(render_descriptor(volume).encode("utf-8"))
        self.assertEqual(data["ProgramArguments"][5], "/tmp/R&D <build>")

    def test_descriptor_path_and_label_from_config(self) -> None:
        with home_env("daemon:\n  dir: /tmp/daemons\n  label_prefix: com.example.vol\n"):
            volume = resolve_volume("cases")
            self.assertEqual(daemon_label(volume), "com.example.vol.cases")
            self.assertEqual(
                daemon_descriptor_path(volume), Path("/tmp/daemons/com.example.vol.cases.plist")
            )

    def test_default_descriptor_path(self) -> None:
        with home_env():
            volume = resolve_volume()
            self.assertEqual(
                daemon_descriptor_path(volume),
                Path("/Library/LaunchDaemons/org.openfoam.dmgctl.openfoam.plist"),
            )


class DaemonInstallerTests(unittest.TestCase):
    def test_install_copies_staged_file_with_sudo(self) -> None:
        seen: dict[str, str] = {}

        def fake_run(argv, check):
            seen["argv0"] = argv[0]
            seen["argv1"] = argv[1]
            seen["content"] = Path(argv[2]).read_text(encoding="utf-8")
            seen["target"] = argv[3]
            return subprocess.CompletedProcess(args=argv, returncode=0)

        with (
            home_env(),
            unittest.mock.patch("dmgctl.lib.images.subprocess.run", side_effect=fake_run),
        ):
            DaemonInstaller().install("<plist/>", Path("/Library/LaunchDaemons/x.plist"))

        self.assertEqual((seen["argv0"], seen["argv1"]), ("sudo", "cp"))
        self.assertEqual(seen["content"], "<plist/>")
        self.assertEqual(seen["target"], "/Library/LaunchDaemons/x.plist")

    def test_install_failure_raises(self) -> None:
        with (
            home_env(),
            unittest.mock.patch("dmgctl.lib.images.subprocess.run") as run_mock,
        ):
            run_mock.return_value = subprocess.CompletedProcess(args=[], returncode=1)
            with self.assertRaises(ExternalCommandFailure) as ctx:
                DaemonInstaller().install("<plist/>", Path("/Library/LaunchDaemons/x.plist"))
            self.assertIn("sudo cp", str(ctx.exception))

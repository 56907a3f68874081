import unittest
from unittest.mock import patch

from pkgshim import errors
from pkgshim.config import Settings
from pkgshim.context import BuildContext
from pkgshim.target import Target, get_target


class TestTarget(unittest.TestCase):

    def test_string(self):
        self.assertEqual(str(Target("linux", "amd64")), "linux_amd64")
        self.assertEqual(str(Target("linux", "amd64", static=True)), "linux_amd64_static")
        self.assertEqual(str(Target("linux", "arm", "7")), "linux_armv7")
        self.assertEqual(str(Target("linux", "arm", "6", True)), "linux_armv6_static")

    def test_string_unique_per_triple(self):
        targets = [
            Target(os_name, arch, arm, static)
            for os_name in ("linux", "darwin", "windows")
            for arch, arm in (("amd64", ""), ("arm64", ""), ("arm", "6"), ("arm", "7"), ("386", ""))
            for static in (False, True)
        ]
        self.assertEqual(len({str(t) for t in targets}), len(targets))

    def test_equality(self):
        self.assertEqual(Target("linux", "amd64", "", True), Target("linux", "amd64", "", True))
        self.assertNotEqual(Target("linux", "amd64", "", True), Target("linux", "amd64", "", False))

    @patch('pkgshim.target.logger')
    def test_cargo_target_linux_amd64(self, mock_logger):
        self.assertEqual(Target("linux", "amd64", static=True).cargo_target(), "x86_64-unknown-linux-musl")
        self.assertEqual(Target("linux", "amd64", static=False).cargo_target(), "x86_64-unknown-linux-gnu")
        mock_logger.warning.assert_not_called()

    def test_cargo_target_table(self):
        cases = {
            Target("linux", "386"): "i686-unknown-linux-gnu",
            Target("linux", "arm", "6"): "arm-unknown-linux-gnueabihf",
            Target("linux", "arm", "7"): "armv7-unknown-linux-gnueabihf",
            Target("linux", "arm64"): "aarch64-unknown-linux-gnu",
            Target("darwin", "amd64"): "x86_64-apple-darwin",
            Target("darwin", "amd64", static=True): "x86_64-apple-darwin",
            Target("windows", "amd64"): "x86_64-pc-windows-gnu",
        }
        for target, triple in cases.items():
            with self.subTest(target=str(target)):
                self.assertEqual(target.cargo_target(), triple)

    @patch('pkgshim.target.logger')
    def test_unmapped_target_warns(self, mock_logger):
        self.assertEqual(Target("freebsd", "amd64").cargo_target(), "")
        self.assertEqual(Target("linux", "386", static=True).cargo_target(), "")
        self.assertEqual(mock_logger.warning.call_count, 2)


class TestGetTarget(unittest.TestCase):

    @patch('pkgshim.context.run_shell_command')
    def test_environment_overrides(self, mock_run):
        ctx = BuildContext(Settings(goos="linux", goarch="arm", goarm="6"), cwd="/src")
        self.assertEqual(get_target(ctx, static=False), Target("linux", "arm", "6", False))
        mock_run.assert_not_called()

    @patch('pkgshim.context.run_shell_command')
    def test_queries_go_env(self, mock_run):
        answers = {"GOOS": "linux\n", "GOARCH": "arm\n", "GOARM": "7,softfloat\n"}
        mock_run.side_effect = lambda cmd, **kwargs: (answers[cmd[2]], "", 0)
        ctx = BuildContext(Settings(), cwd="/src")
        self.assertEqual(get_target(ctx, static=True), Target("linux", "arm", "7", True))
        self.assertEqual([c.args[0] for c in mock_run.call_args_list], [
            ["go", "env", "GOOS"], ["go", "env", "GOARCH"], ["go", "env", "GOARM"],
        ])

    @patch('pkgshim.context.run_shell_command')
    def test_arm_variant_only_for_arm(self, mock_run):
        ctx = BuildContext(Settings(goos="linux", goarch="amd64", goarm="7"), cwd="/src")
        self.assertEqual(get_target(ctx, static=False).arm, "")

    @patch('pkgshim.context.run_shell_command', return_value=("", "go: command not found", 127))
    def test_go_env_failure(self, mock_run):
        ctx = BuildContext(Settings(), cwd="/src")
        with self.assertRaises(errors.TargetError):
            get_target(ctx, static=False)


if __name__ == "__main__":
    unittest.main()

import os
import unittest
from unittest.mock import patch

from pkgshim import errors
from pkgshim.pkgconfig import (
    PKG_CONFIG_EXEC_NAME,
    build_args,
    find_pkg_config,
    get_arg0_path,
    run_pkg_config,
    strip_own_path,
)


@unittest.skipIf(os.name == "nt", "POSIX paths")
class TestStripOwnPath(unittest.TestCase):

    def test_drops_own_entry_and_everything_before(self):
        path = os.pathsep.join(["/home/u/bin", "/opt/shim", "/usr/local/bin", "/usr/bin"])
        self.assertEqual(
            strip_own_path(path, "/opt/shim/pkg-config"),
            os.pathsep.join(["/usr/local/bin", "/usr/bin"]),
        )

    def test_last_occurrence_wins(self):
        path = os.pathsep.join(["/opt/shim", "/a", "/opt/shim", "/usr/bin"])
        self.assertEqual(strip_own_path(path, "/opt/shim/pkg-config"), "/usr/bin")

    def test_not_on_path(self):
        path = os.pathsep.join(["/usr/local/bin", "/usr/bin"])
        self.assertEqual(strip_own_path(path, "/opt/shim/pkg-config"), path)

    def test_empty_element_is_current_directory(self):
        arg0 = os.path.join(os.getcwd(), PKG_CONFIG_EXEC_NAME)
        path = os.pathsep.join(["", "/usr/bin"])
        self.assertEqual(strip_own_path(path, arg0), "/usr/bin")

    def test_arg0_path(self):
        self.assertEqual(get_arg0_path("/opt/shim/pkg-config"), "/opt/shim/pkg-config")
        self.assertEqual(get_arg0_path("pkg-config"), os.path.join(os.getcwd(), "pkg-config"))


class TestForwarding(unittest.TestCase):

    def test_build_args(self):
        self.assertEqual(build_args(["flux"]), ["--", "flux"])
        self.assertEqual(
            build_args(["flux", "zlib"], cflags=True, libs_flag=True, static=True, modversion=True),
            ["--cflags", "--libs", "--static", "--modversion", "--", "flux", "zlib"],
        )

    @patch('pkgshim.pkgconfig.logger')
    @patch('shutil.which', return_value=None)
    def test_find_pkg_config_missing(self, mock_which, mock_logger):
        with self.assertRaises(errors.PkgConfigNotFoundError) as cm:
            find_pkg_config("/usr/bin")
        self.assertEqual(cm.exception.stage, "forward")
        mock_which.assert_called_once_with(PKG_CONFIG_EXEC_NAME, path="/usr/bin")

    @patch('pkgshim.pkgconfig.logger')
    @patch('subprocess.call', return_value=0)
    def test_prepends_descriptor_dir(self, mock_call, mock_logger):
        environ = {"PATH": "/usr/bin", "PKG_CONFIG_PATH": "/usr/lib/pkgconfig"}
        self.assertEqual(run_pkg_config("/usr/bin/pkg-config", "/tmp/pkgconfig1", ["--libs", "--", "flux"], environ), 0)

        args, kwargs = mock_call.call_args
        self.assertEqual(args[0], ["/usr/bin/pkg-config", "--libs", "--", "flux"])
        self.assertEqual(kwargs["env"]["PKG_CONFIG_PATH"], "/tmp/pkgconfig1" + os.pathsep + "/usr/lib/pkgconfig")
        self.assertEqual(environ["PKG_CONFIG_PATH"], "/usr/lib/pkgconfig")

    @patch('pkgshim.pkgconfig.logger')
    @patch('subprocess.call', return_value=1)
    def test_exit_code_is_returned(self, mock_call, mock_logger):
        self.assertEqual(run_pkg_config("pkg-config", "/tmp/pkgconfig1", ["--", "zlib"], {}), 1)
        self.assertEqual(mock_call.call_args.kwargs["env"]["PKG_CONFIG_PATH"], "/tmp/pkgconfig1")


if __name__ == "__main__":
    unittest.main()

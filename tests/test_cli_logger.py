import io
import os
import tempfile
import unittest
from unittest.mock import patch

from pkgshim.cli_logger import Logger


class TestLogger(unittest.TestCase):

    def test_records_are_held_until_flush(self):
        log = Logger()
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            log.info("Resolved module", module="github.com/influxdata/flux", version="v0.50.2")
            self.assertEqual(stderr.getvalue(), "")

        stream = io.StringIO()
        log.flush(stream)
        self.assertIn("Resolved module module=github.com/influxdata/flux version=v0.50.2", stream.getvalue())
        self.assertEqual(log.records, [])

    def test_discard(self):
        log = Logger()
        log.warning("something")
        log.discard()
        stream = io.StringIO()
        log.flush(stream)
        self.assertEqual(stream.getvalue(), "")

    def test_verbose_prints_immediately(self):
        log = Logger()
        log.configure(verbose=True)
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            log.error("Cargo build failed", returncode=101)
        self.assertIn("Cargo build failed returncode=101", stderr.getvalue())
        self.assertEqual(log.records, [])

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "pkg-config.log")
            log = Logger()
            log.configure(log_file=path)
            log.info("Running pkg-config", args=["--libs", "--", "flux"])
            log.log_output("   Compiling flux\n\nerror: boom\n")
            with open(path) as f:
                lines = f.read().splitlines()
        self.assertTrue(lines[0].endswith("[INFO] Running pkg-config args=[--libs, --, flux]"))
        self.assertEqual(lines[1:], ["[ERROR]    Compiling flux", "[ERROR] error: boom"])


if __name__ == "__main__":
    unittest.main()

import os
import time

from . import errors
from .cli_logger import logger
from .config import Settings
from .modload import find_mod_root
from .utils import run_shell_command


class BuildContext:
    """State shared by the pipeline stages of a single invocation.

    Lookups that are expensive or must stay consistent for the whole run
    (the module root, ``go env`` answers) are computed once and cached here
    rather than in module globals. The optional deadline bounds every
    subprocess started through ``run``.
    """

    def __init__(self, settings=None, cwd=None, modroot=None):
        self.settings = settings if settings is not None else Settings.from_env()
        self.cwd = cwd or os.getcwd()
        self._modroot = modroot
        self._go_env = {}
        self.deadline = None
        if self.settings.timeout:
            self.deadline = time.monotonic() + self.settings.timeout

    @property
    def environ(self):
        return self.settings.environ

    @property
    def modroot(self):
        if self._modroot is None:
            self._modroot = find_mod_root(self.cwd)
            logger.info("Determined module root", path=self._modroot)
        return self._modroot

    def remaining(self, stage):
        """Seconds left before the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        left = self.deadline - time.monotonic()
        if left <= 0:
            raise errors.Cancelled(stage)
        return left

    def run(self, command, stage, cwd=None, env=None, merge_output=False):
        if env is None:
            env = self.environ or None
        return run_shell_command(
            command,
            env=env,
            cwd=cwd or self.cwd,
            timeout=self.remaining(stage),
            merge_output=merge_output,
            stage=stage,
        )

    def go_env(self, key, error=errors.TargetError, stage="target"):
        """Return the value ``go env`` reports for key."""
        if key in self._go_env:
            return self._go_env[key]
        stdout, stderr, returncode = self.run([self.settings.go, "env", key], stage=stage)
        if returncode != 0:
            logger.log_output(stderr)
            raise error(f"go env {key} failed (exit code {returncode}): {stderr.strip()}")
        value = stdout.strip()
        self._go_env[key] = value
        return value

"""Errors raised by the resolution and build pipeline.

Every error names the stage that failed so the command line can report a
structured diagnostic before exiting.
"""


class PkgShimError(Exception):
    """Base class for all pipeline failures."""

    stage = "pkgshim"


class ManifestParseError(PkgShimError):
    stage = "manifest"

    def __init__(self, message, filename="go.mod", lineno=None):
        self.filename = filename
        self.lineno = lineno
        if lineno is not None:
            message = f"{filename}:{lineno}: {message}"
        super().__init__(message)


class ManifestNotFoundError(ManifestParseError):
    """No go.mod was found in the start directory or any parent."""


class ModuleNotFoundError(PkgShimError):
    stage = "locate"

    def __init__(self, module_path):
        self.module_path = module_path
        super().__init__(f"could not find {module_path} module")


class FetchError(PkgShimError):
    stage = "fetch"

    def __init__(self, message, output=""):
        self.output = output
        super().__init__(message)


class VersionUnresolvedError(PkgShimError):
    stage = "version"


class CopyError(PkgShimError):
    stage = "copy"


class TargetError(PkgShimError):
    stage = "target"


class BuildError(PkgShimError):
    stage = "build"

    def __init__(self, message, output="", returncode=None):
        self.output = output
        self.returncode = returncode
        super().__init__(message)


class StageError(PkgShimError):
    stage = "stage"


class PkgConfigNotFoundError(PkgShimError):
    stage = "forward"


class Cancelled(PkgShimError):
    """A subprocess outlived the invocation deadline and was killed."""

    def __init__(self, stage, command=None):
        self.stage = stage
        self.command = command
        message = "deadline exceeded"
        if command:
            message += f" while running {' '.join(command)}"
        super().__init__(message)

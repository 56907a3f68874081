import os

from . import errors

MANIFEST_FILE = "go.mod"


def find_mod_root(start="."):
    """Walk up from start to the first directory holding a go.mod file."""
    directory = os.path.abspath(start)
    while True:
        if os.path.isfile(os.path.join(directory, MANIFEST_FILE)):
            return directory
        parent = os.path.dirname(directory)
        if parent == directory:
            raise errors.ManifestNotFoundError(
                f"cannot find main module: no {MANIFEST_FILE} in {os.path.abspath(start)} or any parent directory"
            )
        directory = parent


def read_manifest(modroot):
    path = os.path.join(modroot, MANIFEST_FILE)
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise errors.ManifestNotFoundError(f"could not read {path}: {e}")

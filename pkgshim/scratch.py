import contextlib
import os
import shutil
import stat
import tempfile

from . import errors
from .cli_logger import logger
from .utils import copy_tree

if os.name == "posix":
    import fcntl

# Subdirectory of the build cache holding writable module copies.
SCRATCH_NAMESPACE = "pkgconfig"


def get_build_cache(ctx):
    """The Go build cache is a safe place to keep copies of module sources."""
    if ctx.settings.gocache:
        return ctx.settings.gocache
    return ctx.go_env("GOCACHE", error=errors.CopyError, stage="copy")


def scratch_dir(cache, library):
    key = f"{library.path}@{library.version}".replace("/", os.sep)
    return os.path.join(cache, SCRATCH_NAMESPACE, key)


@contextlib.contextmanager
def _cache_lock(destination):
    """Hold an advisory lock on the cache key while it is being populated."""
    os.makedirs(os.path.dirname(destination), exist_ok=True)
    if os.name != "posix":
        yield
        return
    with open(destination + ".lock", "a") as lock_handle:
        fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)


def _copy_into_place(src_dir, destination):
    """Copy into a temporary sibling and rename it onto destination."""
    parent = os.path.dirname(destination)
    tmpdir = tempfile.mkdtemp(prefix="." + os.path.basename(destination) + ".", suffix=".tmp", dir=parent)
    try:
        copy_tree(src_dir, tmpdir)
        os.rename(tmpdir, destination)
    except OSError as e:
        shutil.rmtree(tmpdir, ignore_errors=True)
        if os.path.isdir(destination):
            logger.warning("Scratch copy was completed by another process", dir=destination)
            return
        raise errors.CopyError(f"failed to copy {src_dir} to {destination}: {e}")


def copy_if_read_only(ctx, library):
    """Give library a writable source directory, copying it if needed.

    Returns the directory the build should use.
    """
    try:
        st = os.stat(library.dir)
    except OSError as e:
        raise errors.CopyError(f"cannot stat module directory {library.dir}: {e}")
    if st.st_mode & stat.S_IWUSR:
        return library.dir

    cache = get_build_cache(ctx)
    destination = scratch_dir(cache, library)
    if os.path.isdir(destination):
        logger.info("Using existing writable copy", dir=destination)
        library.dir = destination
        return destination

    try:
        with _cache_lock(destination):
            if not os.path.isdir(destination):
                logger.info("Copying read-only module", src=library.dir, dst=destination)
                _copy_into_place(library.dir, destination)
    except OSError as e:
        raise errors.CopyError(f"cannot prepare scratch directory {destination}: {e}")

    library.dir = destination
    return destination

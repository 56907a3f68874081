import os
import shutil
import stat
from ..cli_logger import logger


def _safe_join(base, *paths):
    """Safely join paths, preventing path traversal attacks."""
    base = os.path.abspath(base)
    final = os.path.abspath(os.path.join(base, *paths))
    if not final.startswith(base + os.sep) and final != base:
        raise IOError(f"Unsafe path detected: {final}")
    return final


def copy_tree(src_dir, dest_dir):
    """Copy every file under src_dir into dest_dir, byte for byte.

    Directories are created 0755 and every copied file is made owner-writable,
    since the source is typically a read-only module cache. Any read or write
    error propagates to the caller.
    """
    os.makedirs(dest_dir, mode=0o755, exist_ok=True)
    count = 0
    for root, _, files in os.walk(src_dir, followlinks=True):
        relpath = os.path.relpath(root, src_dir)
        target_root = _safe_join(dest_dir, relpath)
        os.makedirs(target_root, mode=0o755, exist_ok=True)
        os.chmod(target_root, 0o755)
        for name in files:
            src_path = os.path.join(root, name)
            dst_path = os.path.join(target_root, name)
            with open(src_path, "rb") as r, open(dst_path, "wb") as w:
                shutil.copyfileobj(r, w)
            mode = stat.S_IMODE(os.stat(src_path).st_mode)
            os.chmod(dst_path, mode | stat.S_IWUSR | stat.S_IRUSR)
            count += 1
    logger.step_info(f"copied {count} files", indent=2)
    return count


def link_file(src, dst):
    """Hard-link src to dst, replacing whatever occupies dst."""
    if os.path.lexists(dst):
        os.remove(dst)
    os.link(src, dst)

"""Locating and running the real pkg-config behind this wrapper."""

import os
import shutil
import subprocess
import sys

from . import errors
from .cli_logger import logger

# The name this wrapper is installed under. It is used to find and drop the
# wrapper's own PATH entry so the next pkg-config found is the real one.
PKG_CONFIG_EXEC_NAME = "pkg-config.exe" if os.name == "nt" else "pkg-config"


def get_arg0_path(argv0=None):
    arg0 = argv0 if argv0 is not None else sys.argv[0]
    if os.sep in arg0 or "/" in arg0:
        return os.path.abspath(arg0)
    return os.path.join(os.getcwd(), arg0)


def strip_own_path(path, arg0path):
    """Drop the wrapper's PATH entry and every entry before it.

    The last occurrence wins when the same directory is listed twice.
    """
    entries = path.split(os.pathsep) if path else []
    for i in range(len(entries) - 1, -1, -1):
        # An empty element means the current directory.
        directory = os.path.abspath(entries[i] or ".")
        if os.path.join(directory, PKG_CONFIG_EXEC_NAME) == arg0path:
            entries = entries[i + 1:]
            break
    return os.pathsep.join(entries)


def find_pkg_config(path):
    pkg_config = shutil.which(PKG_CONFIG_EXEC_NAME, path=path)
    if pkg_config is None:
        raise errors.PkgConfigNotFoundError(f"could not find a {PKG_CONFIG_EXEC_NAME} executable on PATH")
    logger.info("Found pkg-config executable", path=pkg_config)
    return pkg_config


def build_args(libs, cflags=False, libs_flag=False, static=False, modversion=False):
    args = []
    if cflags:
        args.append("--cflags")
    if libs_flag:
        args.append("--libs")
    if static:
        args.append("--static")
    if modversion:
        args.append("--modversion")
    args.append("--")
    args.extend(libs)
    return args


def run_pkg_config(exec_cmd, pkg_config_dir, args, environ):
    """Run the real pkg-config with pkg_config_dir searched first.

    stdout and stderr are inherited. Returns its exit code.
    """
    env = dict(environ)
    path_env = env.get("PKG_CONFIG_PATH")
    if path_env:
        env["PKG_CONFIG_PATH"] = pkg_config_dir + os.pathsep + path_env
    else:
        env["PKG_CONFIG_PATH"] = pkg_config_dir

    logger.info("Running pkg-config", exec=exec_cmd, args=args)
    return subprocess.call([exec_cmd] + args, env=env)

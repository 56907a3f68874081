import os
import re

from packaging.version import InvalidVersion, Version

from . import errors
from .cli_logger import logger

_DESCRIBE_REGEX = re.compile(r"^(v\d+\.\d+\.\d+)(?:-(\d+)-(\w+))?$")

PRERELEASE_LABEL = "dev"


def escape_module_path(path):
    """Apply the module cache's case encoding: each capital becomes !lower."""
    return re.sub(r"[A-Z]", lambda m: "!" + m.group(0).lower(), path)


def get_version_from_path(directory, module_path):
    """Return the version encoded in a module cache directory name, or None."""
    sep = os.sep
    directory = directory.rstrip("/" + sep)
    escaped = escape_module_path(module_path).replace("/", sep)
    regex = re.compile(
        r"(?:^|" + re.escape(sep) + r")" + re.escape(escaped)
        + r"@(v\d+\.\d+\.\d+[^" + re.escape(sep) + r"]*)$"
    )
    m = regex.search(directory)
    if m is None:
        return None
    return m.group(1)


def get_version_from_git(ctx, directory):
    """Derive a version from ``git describe`` run in directory, or None.

    An exact tag is the version. Commits past the last tag mean the source is
    unreleased work heading for the next minor release, so the minor number
    is bumped and the result is marked as a pre-release of it.
    """
    stdout, stderr, returncode = ctx.run([ctx.settings.git, "describe"], stage="version", cwd=directory)
    if returncode != 0:
        logger.info("git describe failed", dir=directory, output=stderr.strip())
        return None

    described = stdout.strip()
    m = _DESCRIBE_REGEX.match(described)
    if m is None:
        logger.info(f"Invalid tag version format: {described}")
        return None

    tag, commits, rev = m.groups()
    if commits is None:
        return tag

    try:
        release = Version(tag[1:])
    except InvalidVersion as e:
        logger.info(f"Could not parse tag {tag}: {e}")
        return None
    return f"v{release.major}.{release.minor + 1}.0-{PRERELEASE_LABEL}.{commits}+{rev}"


def get_version(ctx, directory, module_path):
    v = get_version_from_path(directory, module_path)
    if v is not None:
        return v
    logger.info("Could not determine version from base path", dir=directory)

    v = get_version_from_git(ctx, directory)
    if v is not None:
        return v
    logger.info("Could not determine version from git data", dir=directory)

    raise errors.VersionUnresolvedError(f"unable to determine {module_path} version in {directory}")

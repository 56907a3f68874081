import json
import os

from . import errors
from .cli_logger import logger
from .modfile import ModuleVersion, is_local_path
from .version import get_version


def find_module(ctx, graph, module_path):
    """Find module_path in the module graph and return it with its directory.

    The main module itself comes first, then replace directives, then the
    require list. Only the last two may fetch from the network.
    """
    if graph.module == module_path:
        logger.info("Module is the main module", module=module_path, modroot=graph.modroot)
        v = get_version(ctx, graph.modroot, module_path)
        return ModuleVersion(module_path, v, graph.modroot)

    require = graph.find_require(module_path)
    required_version = require.mod.version if require else None

    replace = graph.find_replace(module_path, required_version)
    if replace is not None:
        logger.info("Module is replaced", module=module_path, replacement=str(replace.new))
        return get_module(ctx, graph, module_path, replace.new)

    if require is not None:
        logger.info("Module is required", module=module_path, version=required_version)
        return get_module(ctx, graph, module_path, require.mod)

    raise errors.ModuleNotFoundError(module_path)


def get_module(ctx, graph, module_path, ver):
    """Resolve ver to a directory, fetching it when it is not a local path."""
    if is_local_path(ver.path):
        # A filesystem replacement is built in place like the main module.
        directory = os.path.abspath(os.path.join(graph.modroot, ver.path))
        logger.info("Module path references the filesystem", dir=directory)
        v = get_version(ctx, directory, module_path)
        return ModuleVersion(module_path, v, directory)

    return download_module(ctx, graph, ver)


def download_module(ctx, graph, ver):
    """Download exactly one module with ``go mod download -json``.

    Only the named module is requested so that none of its dependencies
    are fetched.
    """
    target = str(ver)
    cmd = [ctx.settings.go, "mod", "download", "-json", target]
    logger.info("Downloading module", module=target, dir=graph.modroot)
    stdout, stderr, returncode = ctx.run(cmd, stage="fetch", cwd=graph.modroot)

    try:
        data = json.loads(stdout) if stdout.strip() else None
    except json.JSONDecodeError:
        data = None

    if returncode != 0:
        logger.log_output(stderr)
        detail = stderr.strip()
        if isinstance(data, dict) and data.get("Error"):
            detail = data["Error"]
        raise errors.FetchError(f"go mod download {target} failed (exit code {returncode}): {detail}", output=stderr)

    if not isinstance(data, dict):
        raise errors.FetchError(f"go mod download {target} returned malformed output", output=stdout)
    if data.get("Error"):
        raise errors.FetchError(f"go mod download {target} failed: {data['Error']}", output=stdout)

    missing = [key for key in ("Dir", "Path", "Version") if not data.get(key)]
    if missing:
        raise errors.FetchError(
            f"go mod download {target} output is missing {', '.join(missing)}", output=stdout
        )
    logger.info("Module downloaded", module=data["Path"], version=data["Version"], dir=data["Dir"])
    return ModuleVersion(data["Path"], data["Version"], data["Dir"])

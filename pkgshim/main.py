import sys
import tempfile

import click

from .cli_logger import logger
from .config import Settings
from .context import BuildContext
from .decorators import handle_exceptions
from .library import generate_package_configs
from .pkgconfig import build_args, find_pkg_config, get_arg0_path, run_pkg_config, strip_own_path


@click.command()
@click.option("--cflags", is_flag=True, help="output all pre-processor and compiler flags")
@click.option("--libs", "libs_flag", is_flag=True, help="output all linker flags")
@click.option("--static", is_flag=True, help="output linker flags for static linking and build static libraries")
@click.option("--modversion", is_flag=True, help="output version for package")
@click.argument("libs", nargs=-1)
@handle_exceptions
def cli(cflags, libs_flag, static, modversion, libs):
    """pkg-config wrapper that builds the native libraries of Go modules.

    Libraries it knows how to build are compiled and described in a
    temporary directory; the request is then handed to the real pkg-config.
    """
    settings = Settings.from_env()
    logger.configure(log_file=settings.log_file, verbose=settings.verbose)

    arg0path = get_arg0_path()
    logger.info("Started pkg-config", arg0=arg0path, args=sys.argv[1:])
    path = strip_own_path(settings.environ.get("PATH", ""), arg0path)
    settings.environ["PATH"] = path
    pkg_config_exec = find_pkg_config(path)

    ctx = BuildContext(settings)
    with tempfile.TemporaryDirectory(prefix="pkgconfig") as pkg_config_dir:
        generate_package_configs(ctx, list(libs), pkg_config_dir, static=static)
        args = build_args(libs, cflags=cflags, libs_flag=libs_flag, static=static, modversion=modversion)
        returncode = run_pkg_config(pkg_config_exec, pkg_config_dir, args, settings.environ)

    if returncode != 0:
        logger.error("Running pkg-config failed", returncode=returncode)
        logger.flush()
    else:
        logger.discard()
    sys.exit(returncode)


if __name__ == '__main__':
    cli()

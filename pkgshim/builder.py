import os

from . import errors
from .cli_logger import logger
from .utils import link_file

# Toolchain overrides meant for the host project's own cgo code. A cross
# build of the library must not see them or its build scripts probe the
# wrong compiler.
CROSS_COMPILE_STRIPPED_VARS = ("CC", "CXX", "LD", "AR")


def _remove_env_vars(env, keys):
    return {k: v for k, v in env.items() if k not in keys}


def get_build_dir(library):
    return os.path.join(library.dir, library.spec.build_dir)


def build(ctx, library):
    """Run ``cargo build --release`` for the library's target.

    Returns the directory cargo wrote the release artifacts to.
    """
    build_dir = get_build_dir(library)
    cmd = [ctx.settings.cargo, "build", "--release"]
    env = dict(ctx.environ or os.environ)

    target_string = library.target.cargo_target()
    if target_string:
        cmd += ["--target", target_string]
        removed = [k for k in CROSS_COMPILE_STRIPPED_VARS if k in env]
        env = _remove_env_vars(env, CROSS_COMPILE_STRIPPED_VARS)
        logger.info("Overwrote rust build environment", removed=removed)

    logger.info("Executing cargo build", dir=build_dir, target=target_string)
    output, _, returncode = ctx.run(cmd, stage="build", cwd=build_dir, env=env, merge_output=True)
    if returncode != 0:
        logger.error(f"Cargo build failed (Exit Code: {returncode}):")
        logger.log_output(output)
        raise errors.BuildError(
            f"cargo build of {library.spec.name} failed (exit code {returncode})",
            output=output,
            returncode=returncode,
        )

    target_dir = os.path.join(build_dir, "target", target_string, "release")
    logger.success("Build succeeded", dir=target_dir)
    return target_dir


def stage_libraries(library, target_dir):
    """Hard-link the built archives into the target-qualified libdir."""
    libdir = os.path.join(get_build_dir(library), "lib", str(library.target))
    logger.info("Creating libdir", libdir=libdir)
    try:
        os.makedirs(libdir, exist_ok=True)
    except OSError as e:
        raise errors.StageError(f"cannot create {libdir}: {e}")

    for name in library.spec.libs:
        basename = f"lib{name}.a"
        src = os.path.join(target_dir, basename)
        dst = os.path.join(libdir, basename)
        if not os.path.isfile(src):
            raise errors.StageError(f"build reported success but {src} does not exist")
        logger.step_info(f"linking {src} -> {dst}", indent=2)
        try:
            link_file(src, dst)
        except OSError as e:
            raise errors.StageError(f"cannot link {src} to {dst}: {e}")
    return libdir

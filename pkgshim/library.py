import os
from dataclasses import dataclass

from . import builder, descriptor, errors, modfile, modload, scratch
from .cli_logger import logger
from .config import DEFAULT_LIBRARIES, LibrarySpec, get_library_specs
from .locator import find_module
from .target import Target, get_target


@dataclass
class Library:
    """A resolved native library, ready to be built and described."""
    spec: LibrarySpec
    path: str
    version: str
    dir: str
    target: Target


def configure(ctx, spec, static=False):
    """Resolve the target and the source directory of spec's module."""
    target = get_target(ctx, static)

    modroot = ctx.modroot
    data = modload.read_manifest(modroot)
    graph = modfile.parse(modroot, data, filename=os.path.join(modroot, modload.MANIFEST_FILE))

    mod = find_module(ctx, graph, spec.module)
    logger.info("Resolved module", module=mod.path, version=mod.version, dir=mod.dir)
    return Library(spec=spec, path=mod.path, version=mod.version, dir=mod.dir, target=target)


def install(ctx, library):
    """Build library and stage its archives into its libdir."""
    scratch.copy_if_read_only(ctx, library)
    target_dir = builder.build(ctx, library)
    return builder.stage_libraries(library, target_dir)


def _library_specs(ctx, names):
    try:
        modroot = ctx.modroot
    except errors.ManifestNotFoundError:
        # Outside a Go module only names unrelated to us can be forwarded.
        if any(name in DEFAULT_LIBRARIES for name in names):
            raise
        return {}
    return get_library_specs(modroot)


def generate_package_configs(ctx, names, outdir, static=False):
    """Build every known library in names and write its .pc file into outdir.

    Libraries are processed one at a time in the order given. Names with no
    known library are left for the real pkg-config to resolve.
    """
    specs = _library_specs(ctx, names)
    written = []
    for name in names:
        spec = specs.get(name)
        if spec is None:
            logger.debug(f"No build recipe for {name}; leaving it to pkg-config")
            continue

        logger.info("Configuring library", name=name, module=spec.module)
        library = configure(ctx, spec, static)
        install(ctx, library)

        pkgfile = os.path.join(outdir, name + ".pc")
        with open(pkgfile, "w", newline="\n") as f:
            descriptor.write_package_config(library, f)
        logger.success("Wrote pkg-config file", path=pkgfile)
        written.append(pkgfile)
    return written

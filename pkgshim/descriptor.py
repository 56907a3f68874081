import os

# Separator written between path components in the .pc path fields. On
# Windows the backslash is escaped twice: once for pkg-config's own output
# and once more for the go tool passing the flags on to the linker.
PC_SEP = "\\\\" if os.name == "nt" else "/"


def _pc_path(path):
    if os.name == "nt":
        return PC_SEP.join(path.replace("/", "\\").split("\\"))
    return path


def _join(*parts):
    return PC_SEP.join(parts)


def strip_version_marker(version):
    return version[1:] if version.startswith("v") else version


def libs_flags(library):
    flags = ["-L${libdir}"] + [f"-l{name}" for name in library.spec.libs]
    if library.target.os == "linux":
        flags.append("-ldl")
        if library.target.static:
            flags.append("-lpthread")
    return " ".join(flags)


def write_package_config(library, w):
    """Write the pkg-config description of library to the stream w."""
    prefix = os.path.join(library.dir, library.spec.build_dir)
    w.write(f"prefix={_pc_path(os.path.normpath(prefix))}\n")
    w.write(f"target={library.target}\n")
    w.write("exec_prefix=${prefix}\n")
    w.write(f"libdir={_join('${exec_prefix}', 'lib', '${target}')}\n")
    w.write(f"includedir={_join('${prefix}', 'include')}\n")
    w.write("\n")
    w.write(f"Name: {library.spec.title}\n")
    w.write(f"Version: {strip_version_marker(library.version)}\n")
    w.write(f"Description: {library.spec.description}\n")
    w.write(f"Libs: {libs_flags(library)}\n")
    w.write("Cflags: -I${includedir}\n")

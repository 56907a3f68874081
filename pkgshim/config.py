import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import toml

from .cli_logger import logger

CONFIG_FILE = "pkgshim.toml"


@dataclass(frozen=True)
class LibrarySpec:
    """A native library the wrapper knows how to build."""
    name: str
    module: str
    title: str
    description: str
    build_dir: str
    libs: Tuple[str, ...]


DEFAULT_LIBRARIES = {
    "flux": LibrarySpec(
        name="flux",
        module="github.com/influxdata/flux",
        title="Flux",
        description="Library for the InfluxData Flux engine",
        build_dir="libflux",
        libs=("flux", "libstd"),
    ),
}


@dataclass
class Settings:
    """Environment the invocation runs in."""
    goos: Optional[str] = None
    goarch: Optional[str] = None
    goarm: Optional[str] = None
    gocache: Optional[str] = None
    go: str = "go"
    git: str = "git"
    cargo: str = "cargo"
    pkg_config_path: Optional[str] = None
    log_file: Optional[str] = None
    verbose: bool = False
    timeout: Optional[float] = None
    environ: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ=None):
        environ = dict(os.environ if environ is None else environ)
        timeout = environ.get("PKGSHIM_TIMEOUT")
        if timeout:
            try:
                timeout = float(timeout)
            except ValueError:
                logger.warning("Ignoring invalid PKGSHIM_TIMEOUT", value=timeout)
                timeout = None
        return cls(
            goos=environ.get("GOOS") or None,
            goarch=environ.get("GOARCH") or None,
            goarm=environ.get("GOARM") or None,
            gocache=environ.get("GOCACHE") or None,
            go=environ.get("GO") or "go",
            git=environ.get("GIT") or "git",
            cargo=environ.get("CARGO") or "cargo",
            pkg_config_path=environ.get("PKG_CONFIG_PATH") or None,
            log_file=environ.get("PKG_CONFIG_LOG") or None,
            verbose=environ.get("PKGSHIM_VERBOSE", "") not in ("", "0", "false"),
            timeout=timeout or None,
            environ=environ,
        )


def load_config(path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    if os.path.exists(config_path):
        logger.info(f"Loading configuration from {config_path}")
        try:
            with open(config_path, "r") as f:
                return toml.load(f)
        except toml.TomlDecodeError as e:
            logger.error(f"Error decoding TOML file at {config_path}: {e}")
            logger.info("Please check the file's format for syntax errors.")
        except IOError as e:
            logger.error(f"Error reading configuration file at {config_path}: {e}")
            logger.info("Please check file permissions.")
    return {}


def get_library_specs(path="."):
    """Return the built-in libraries merged with those declared in pkgshim.toml."""
    specs = dict(DEFAULT_LIBRARIES)
    conf = load_config(path)
    for name, entry in conf.get("libraries", {}).items():
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring library entry '{name}': expected a table")
            continue
        base = specs.get(name)
        module = entry.get("module", base.module if base else None)
        if not module:
            logger.warning(f"Ignoring library entry '{name}': no module path given")
            continue
        specs[name] = LibrarySpec(
            name=name,
            module=module,
            title=entry.get("title", base.title if base else name),
            description=entry.get("description", base.description if base else f"Library for {module}"),
            build_dir=entry.get("build_dir", base.build_dir if base else "."),
            libs=tuple(entry.get("libs", base.libs if base else (name,))),
        )
    return specs

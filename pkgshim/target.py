from dataclasses import dataclass

from .cli_logger import logger

# (os, arch, arm, static) -> cargo target triple. A static flag of None
# matches both linking modes.
CARGO_TARGETS = [
    (("linux", "amd64", "", True), "x86_64-unknown-linux-musl"),
    (("linux", "amd64", "", False), "x86_64-unknown-linux-gnu"),
    (("linux", "386", "", False), "i686-unknown-linux-gnu"),
    (("linux", "arm", "6", False), "arm-unknown-linux-gnueabihf"),
    (("linux", "arm", "7", False), "armv7-unknown-linux-gnueabihf"),
    (("linux", "arm64", "", True), "aarch64-unknown-linux-musl"),
    (("linux", "arm64", "", False), "aarch64-unknown-linux-gnu"),
    (("darwin", "amd64", "", None), "x86_64-apple-darwin"),
    (("darwin", "arm64", "", None), "aarch64-apple-darwin"),
    (("windows", "amd64", "", None), "x86_64-pc-windows-gnu"),
]


@dataclass(frozen=True)
class Target:
    os: str
    arch: str
    arm: str = ""
    static: bool = False

    def __str__(self):
        s = f"{self.os}_{self.arch}"
        if self.arm:
            s += "v" + self.arm
        if self.static:
            s += "_static"
        return s

    def cargo_target(self):
        """Return the cargo triple for this target, or "" to use cargo's default."""
        for (os_name, arch, arm, static), triple in CARGO_TARGETS:
            if (self.os, self.arch, self.arm) != (os_name, arch, arm):
                continue
            if static is None or static == self.static:
                return triple
        logger.warning("Unable to determine cargo target. Using the default.", target=str(self))
        return ""


def get_target(ctx, static):
    """Determine the target from GOOS/GOARCH/GOARM, falling back to ``go env``."""
    settings = ctx.settings
    goos = settings.goos or ctx.go_env("GOOS")
    goarch = settings.goarch or ctx.go_env("GOARCH")

    goarm = ""
    if goarch == "arm":
        goarm = settings.goarm or ctx.go_env("GOARM")
        # Go 1.22 reports e.g. "7,softfloat"; only the version matters here.
        goarm = goarm.split(",")[0]

    target = Target(os=goos, arch=goarch, arm=goarm, static=bool(static))
    logger.info("Determined target", target=str(target))
    return target

from __future__ import annotations

import platform as _stdlib_platform
import sys
from typing import Dict, Optional

from . import actions
from .contracts import CommandRunner
from .errors import UnsupportedArchitectureError, UnsupportedOperatingSystemError
from .models import PlatformProfile

# Host machine identifiers (Node and Python spellings) to PIE architecture names.
ARCHITECTURE_MAP: Dict[str, str] = {
    "x64": "x86_64",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "ia32": "x86",
    "x86": "x86",
    "i386": "x86",
    "i686": "x86",
}

# aix, freebsd, openbsd, sunos and win32 are not supported at this time.
SUPPORTED_OPERATING_SYSTEMS = ("linux", "darwin")

PHP_CONFIG = "php-config"
PHP_FALLBACK_BINARY = "php"
PHP_BINARY_NONE = "NONE"

DEBUG_PROBE = "echo PHP_DEBUG ? '-debug' : '';"
ZTS_PROBE = "echo ZEND_THREAD_SAFE ? '-zts' : '';"


def map_architecture(machine: str) -> str:
    arch = ARCHITECTURE_MAP.get(str(machine).strip().lower())
    if arch is None:
        raise UnsupportedArchitectureError(f"Unsupported architecture: {machine}")
    return arch


def check_operating_system(system: str) -> str:
    if system not in SUPPORTED_OPERATING_SYSTEMS:
        raise UnsupportedOperatingSystemError(f"Unsupported operating system: {system}")
    return system


def truncate_php_version(version: str) -> str:
    """Keep major.minor: "8.3.10-whatever" -> "8.3"."""
    return ".".join(str(version).strip().split(".")[:2])


class HostInspector:
    """Answers the platform questions that make up an artifact name.

    `machine` and `system` default to the live host; tests pass fixed values.
    """

    def __init__(self, runner: CommandRunner, *, machine: Optional[str] = None, system: Optional[str] = None):
        self.runner = runner
        self.machine = machine if machine is not None else _stdlib_platform.machine()
        self.system = system if system is not None else sys.platform

    def architecture(self) -> str:
        actions.info("Detecting architecture...")
        return map_architecture(self.machine)

    def operating_system(self) -> str:
        actions.info("Detecting operating system...")
        return check_operating_system(self.system)

    def libc_flavour(self) -> str:
        actions.info("Detecting libc flavour...")
        if self.system == "darwin":
            return "bsdlibc"

        # musl's ldd exits 1 for --version and prints its banner on stderr.
        res = self.runner.run("ldd", ["--version"], check=False)
        if "musl" in res.stdout or "musl" in res.stderr:
            return "musl"
        return "glibc"

    def php_binary(self) -> str:
        actions.info("Locating PHP binary...")
        out = self.runner.run(PHP_CONFIG, ["--php-binary"]).stdout.strip()
        if out == PHP_BINARY_NONE:
            actions.warning(
                f"{PHP_CONFIG} --php-binary returned {PHP_BINARY_NONE}, falling back to '{PHP_FALLBACK_BINARY}' on PATH"
            )
            return PHP_FALLBACK_BINARY
        return out

    def php_version(self) -> str:
        actions.info("Detecting php version...")
        return truncate_php_version(self.runner.run(PHP_CONFIG, ["--version"]).stdout)

    def debug_suffix(self, php_binary: str) -> str:
        actions.info("Detecting Zend debug mode...")
        return self.runner.run(php_binary, ["-n", "-r", DEBUG_PROBE]).stdout.strip()

    def zts_suffix(self, php_binary: str) -> str:
        actions.info("Detecting Zend thread safety mode...")
        return self.runner.run(php_binary, ["-n", "-r", ZTS_PROBE]).stdout.strip()

    def profile(self, php_binary: Optional[str] = None) -> PlatformProfile:
        binary = php_binary if php_binary is not None else self.php_binary()
        return PlatformProfile(
            architecture=self.architecture(),
            operating_system=self.operating_system(),
            libc_flavour=self.libc_flavour(),
            php_version=self.php_version(),
            debug_suffix=self.debug_suffix(binary),
            zts_suffix=self.zts_suffix(binary),
            php_binary=binary,
        )

from __future__ import annotations

import contextlib
import io
import unittest

from _testutil import FakeRunner, ensure_repo_on_path, php_host_responses


class TestArchitecture(unittest.TestCase):
    def test_mapping(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import map_architecture

        self.assertEqual(map_architecture("x64"), "x86_64")
        self.assertEqual(map_architecture("arm64"), "arm64")
        self.assertEqual(map_architecture("ia32"), "x86")
        self.assertEqual(map_architecture("x86_64"), "x86_64")
        self.assertEqual(map_architecture("AMD64"), "x86_64")
        self.assertEqual(map_architecture("aarch64"), "arm64")
        self.assertEqual(map_architecture("i686"), "x86")

    def test_unsupported(self) -> None:
        ensure_repo_on_path()

        from phpext_release.errors import UnsupportedArchitectureError
        from phpext_release.host import map_architecture

        for machine in ("ppc64", "s390x", "mips", ""):
            with self.assertRaises(UnsupportedArchitectureError) as cm:
                map_architecture(machine)
            self.assertIn(f"Unsupported architecture: {machine}", str(cm.exception))


class TestOperatingSystem(unittest.TestCase):
    def test_supported_verbatim(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        self.assertEqual(HostInspector(FakeRunner(), machine="x86_64", system="linux").operating_system(), "linux")
        self.assertEqual(HostInspector(FakeRunner(), machine="arm64", system="darwin").operating_system(), "darwin")

    def test_unsupported(self) -> None:
        ensure_repo_on_path()

        from phpext_release.errors import UnsupportedOperatingSystemError
        from phpext_release.host import HostInspector

        for system in ("win32", "freebsd", "aix"):
            with self.assertRaises(UnsupportedOperatingSystemError) as cm:
                HostInspector(FakeRunner(), machine="x86_64", system=system).operating_system()
            self.assertIn(system, str(cm.exception))


class TestLibc(unittest.TestCase):
    def test_darwin_does_not_probe(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner()
        self.assertEqual(HostInspector(runner, machine="arm64", system="darwin").libc_flavour(), "bsdlibc")
        self.assertEqual(runner.calls, [])

    def test_glibc(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner({"ldd --version": (0, "ldd (Ubuntu GLIBC 2.39-0ubuntu8) 2.39\n", "")})
        self.assertEqual(HostInspector(runner, machine="x86_64", system="linux").libc_flavour(), "glibc")
        self.assertEqual(runner.calls[0][1], False)

    def test_musl_with_nonzero_exit(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner({"ldd --version": (1, "musl libc (x86_64)\nVersion 1.2.4\n", "")})
        self.assertEqual(HostInspector(runner, machine="x86_64", system="linux").libc_flavour(), "musl")

        runner = FakeRunner({"ldd --version": (1, "", "musl libc (aarch64)\n")})
        self.assertEqual(HostInspector(runner, machine="aarch64", system="linux").libc_flavour(), "musl")

    def test_failed_probe_defaults_to_glibc(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner({"ldd --version": (127, "", "ldd: not found")})
        self.assertEqual(HostInspector(runner, machine="x86_64", system="linux").libc_flavour(), "glibc")


class TestPhpFacts(unittest.TestCase):
    def test_version_truncation(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector, truncate_php_version

        self.assertEqual(truncate_php_version("8.3.10-whatever"), "8.3")
        self.assertEqual(truncate_php_version("7.4.0"), "7.4")

        runner = FakeRunner({"php-config --version": (0, "8.3.10-whatever\n", "")})
        self.assertEqual(HostInspector(runner, machine="x64", system="linux").php_version(), "8.3")

    def test_php_binary_none_falls_back(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner({"php-config --php-binary": (0, "NONE\n", "")})
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            binary = HostInspector(runner, machine="x64", system="linux").php_binary()
        self.assertEqual(binary, "php")
        self.assertIn("::warning::php-config --php-binary returned NONE", out.getvalue())

        runner = FakeRunner({"php-config --php-binary": (0, "/opt/php/8.3/bin/php\n", "")})
        self.assertEqual(HostInspector(runner, machine="x64", system="linux").php_binary(), "/opt/php/8.3/bin/php")

    def test_php_config_failure_propagates(self) -> None:
        ensure_repo_on_path()

        from phpext_release.errors import CommandFailedError
        from phpext_release.host import HostInspector

        runner = FakeRunner({"php-config": (127, "", "php-config: not found")})
        with self.assertRaises(CommandFailedError):
            HostInspector(runner, machine="x64", system="linux").php_version()

    def test_debug_and_zts_probes_use_resolved_binary(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner(php_host_responses(php_binary="/usr/local/bin/php", debug="-debug\n", zts="-zts"))
        insp = HostInspector(runner, machine="x64", system="linux")
        self.assertEqual(insp.debug_suffix("/usr/local/bin/php"), "-debug")
        self.assertEqual(insp.zts_suffix("/usr/local/bin/php"), "-zts")
        self.assertEqual(runner.calls[0][0][:3], ["/usr/local/bin/php", "-n", "-r"])

    def test_profile(self) -> None:
        ensure_repo_on_path()

        from phpext_release.host import HostInspector

        runner = FakeRunner(php_host_responses(version="8.2.1", zts="-zts"))
        prof = HostInspector(runner, machine="aarch64", system="linux").profile()
        self.assertEqual(prof.architecture, "arm64")
        self.assertEqual(prof.operating_system, "linux")
        self.assertEqual(prof.libc_flavour, "glibc")
        self.assertEqual(prof.php_version, "8.2")
        self.assertEqual(prof.debug_suffix, "")
        self.assertEqual(prof.zts_suffix, "-zts")
        self.assertEqual(prof.php_binary, "/usr/bin/php")


if __name__ == "__main__":
    unittest.main()

"""Mapping of Go targets onto Zig targets and the compiler flags they need."""

from __future__ import annotations

import os
import platform
import sys

from zgo.config import Config
from zgo.errors import ZgoError

SDK_DIR_NAME = "sdk-macos-13.3"

_UNHANDLED_OS = "unhandled Zig OS (this is a bug, please report it)"


class UnsupportedTargetError(ZgoError):
    """Raised for a GOOS or GOARCH that zgo cannot build for."""


def host_goos() -> str:
    """Return the Go name of the operating system this process runs on."""
    plat = sys.platform
    if plat.startswith("win") or plat == "cygwin":
        return "windows"
    if plat.startswith("linux"):
        return "linux"
    if plat == "darwin":
        return "darwin"
    return plat.rstrip("0123456789")


def host_goarch() -> str:
    """Return the Go name of the machine architecture of this host."""
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    if machine in ("aarch64", "arm64", "armv8l"):
        return "arm64"
    if machine in ("i386", "i486", "i586", "i686", "x86"):
        return "386"
    if machine.startswith("arm"):
        return "arm"
    return machine


def target_goos() -> str:
    """Return GOOS from the environment, or the host's when unset."""
    return os.environ.get("GOOS") or host_goos()


def target_goarch() -> str:
    """Return GOARCH from the environment, or the host's when unset."""
    return os.environ.get("GOARCH") or host_goarch()


def zig_suffix(go_os: str) -> str:
    """Return the ABI suffix Zig needs for a Go operating system."""
    match go_os:
        case "windows":
            return "-gnu"
        case "linux":
            return "-musl"
        case "darwin":
            return ""
    raise UnsupportedTargetError("unsupported GOOS")


def zig_os(go_os: str) -> str:
    """Return the Zig name of a Go operating system."""
    match go_os:
        case "windows":
            return "windows"
        case "linux":
            return "linux"
        case "darwin":
            return "macos"
    raise UnsupportedTargetError("unsupported GOOS")


def zig_arch(go_arch: str) -> str:
    """Return the Zig name of a Go architecture."""
    match go_arch:
        case "amd64":
            return "x86_64"
        case "arm64":
            return "aarch64"
        case "386":
            return "386"
    raise UnsupportedTargetError("unsupported GOARCH")


def zig_target_triple() -> str:
    """Return the Zig target triple for the current GOOS/GOARCH target."""
    goos = target_goos()
    return f"{zig_arch(target_goarch())}-{zig_os(goos)}{zig_suffix(goos)}"


def xcode_sdk_dir(cfg: Config) -> str:
    """Return the absolute directory of the macOS SDK checkout."""
    return os.path.abspath(os.path.join(cfg.dir, SDK_DIR_NAME))


def _zig_flags(cfg: Config) -> str:
    match target_goos():
        case "windows":
            return "-Wno-dll-attribute-on-redeclaration"
        case "linux":
            return ""
        case "darwin":
            root = os.path.join(xcode_sdk_dir(cfg), "root")
            frameworks = os.path.join(root, "System/Library/Frameworks")
            return f"-F {frameworks} --sysroot {root}"
    raise UnsupportedTargetError(_UNHANDLED_OS)


def go_cc_zig_flags(cfg: Config) -> str:
    """Return the extra flags for ``zig cc`` on the current target."""
    return _zig_flags(cfg)


def go_cxx_zig_flags(cfg: Config) -> str:
    """Return the extra flags for ``zig c++`` on the current target."""
    return _zig_flags(cfg)


def go_cc(cfg: Config) -> str:
    """Return the CC value that makes cgo compile C through Zig."""
    return " ".join(["zig", "cc", "-target", zig_target_triple(), go_cc_zig_flags(cfg)])


def go_cxx(cfg: Config) -> str:
    """Return the CXX value that makes cgo compile C++ through Zig."""
    return " ".join(["zig", "c++", "-target", zig_target_triple(), go_cxx_zig_flags(cfg)])


def go_build_ld_flags() -> str:
    """Return the -ldflags value ``go build`` needs for the current target."""
    match target_goos():
        case "windows" | "linux":
            return ""
        case "darwin":
            return "-s -w -linkmode external"
    raise UnsupportedTargetError(_UNHANDLED_OS)


def go_build_flags() -> list[str]:
    """Return the extra ``go build`` flags for the current target."""
    match target_goos():
        case "windows" | "linux":
            return []
        case "darwin":
            return ["-buildmode=pie"]
    raise UnsupportedTargetError(_UNHANDLED_OS)


def format_cmd_line(name: str, *args: str) -> str:
    """Render a command line for display, quoting arguments holding spaces."""
    parts = [name]
    parts.extend(f"'{arg}'" if " " in arg else arg for arg in args)
    return " ".join(parts)


def enforce_path(env: list[str], directory: str) -> list[str]:
    """Return ``env`` (``KEY=VALUE`` strings) with ``directory`` first on PATH."""
    result = []
    for entry in env:
        if entry.startswith("PATH="):
            entries = entry[len("PATH="):].split(os.pathsep)
            entry = "PATH=" + os.pathsep.join([directory, *entries])
        result.append(entry)
    return result


def strip_components(path: str, n: int) -> str:
    """Drop the first ``n`` separator-delimited components of ``path``."""
    elems = path.split(os.sep)
    if len(elems) >= n:
        elems = elems[n:]
    return os.sep.join(elems)
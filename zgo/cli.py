"""The zgo command line: building Go programs with Zig as the C toolchain."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from zgo.config import load_config
from zgo.download import ensure_zig_version
from zgo.errors import ZgoError, wrap
from zgo.process import ensure_xcode_sdk, execf
from zgo.targets import (
    enforce_path,
    go_build_flags,
    go_build_ld_flags,
    go_cc,
    go_cxx,
    target_goos,
    zig_target_triple,
)

CONFIG_FILE = "zgo.toml"

USAGE_TEXT = """zgo is a tool for making Go and Zig best friends

Usage:

\tzgo <command> [arguments]

The commands are:

\tbuild    compile packages and dependencies

Use "zgo <command> -h" for more information about a command.
"""

_HELP_FLAGS = ("h", "help")


class _Exit(Exception):
    """Ends command-line processing with the given exit code."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class _Command:
    name: str
    handler: Callable[[list[str]], None]
    usage: str = ""

    def print_usage(self) -> None:
        sys.stderr.write(f"Usage of 'zgo {self.name}':\n{self.usage}")


def compose_go_build_args(args: Sequence[str]) -> list[str]:
    """Return the ``go build`` arguments for ``args``, with target link flags added."""
    result = ["build", *go_build_flags()]
    has_ld_flags = False
    it = iter(args)
    for arg in it:
        if arg == "-ldflags":
            try:
                value = next(it)
            except StopIteration:
                raise ZgoError("flag needs an argument: -ldflags") from None
            result += ["-ldflags", f"{value} {go_build_ld_flags()}"]
            has_ld_flags = True
        else:
            result.append(arg)
    if not has_ld_flags:
        result += ["-ldflags", go_build_ld_flags()]
    return result


def _guard(step: Callable[[], object], msg: str) -> object:
    try:
        return step()
    except (ZgoError, OSError) as exc:
        raise wrap(exc, msg) from exc


def build(args: Sequence[str]) -> None:
    """Build Go packages for GOOS/GOARCH using Zig as the cgo C and C++ compiler."""
    cfg = _guard(lambda: load_config(CONFIG_FILE), "zgo: LoadConfig")

    if target_goos() == "darwin":
        if not cfg.accept_xcode_license:
            sys.stderr.write(
                "zgo: macOS target requires a copy of the macOS Xcode SDK, which is distributed\n"
                "     under the terms at https://www.apple.com/legal/sla/docs/xcode.pdf\n"
                "\n"
            )
            raise ZgoError(
                "zgo: to accept set AcceptXCodeLicense=true in zgo.toml or ZGO_ACCEPT_XCODE_LICENSE=true"
            )
        _guard(lambda: ensure_xcode_sdk(cfg), "zgo")

    zig_exe = _guard(lambda: ensure_zig_version(cfg), "zgo")
    sys.stderr.write(f"zgo: building for {zig_target_triple()} (zig version={cfg.version})\n")

    cc, cxx = go_cc(cfg), go_cxx(cfg)
    if cfg.verbose:
        sys.stderr.write(f"zgo: export CC='{cc}'\n")
        sys.stderr.write(f"zgo: export CXX='{cxx}'\n")
    os.environ["CC"] = cc
    os.environ["CXX"] = cxx

    if os.path.exists("build.zig"):
        _guard(
            lambda: execf(sys.stderr, True, None, "", zig_exe, "build", f"-Dtarget={zig_target_triple()}"),
            "zgo",
        )

    env = enforce_path([f"{k}={v}" for k, v in os.environ.items()], os.path.dirname(zig_exe))
    go_args = compose_go_build_args(args)
    _guard(lambda: execf(sys.stderr, True, env, "", "go", *go_args), "zgo")


_COMMANDS = {cmd.name: cmd for cmd in (_Command("build", build),)}


def _flag_name(arg: str) -> str:
    return arg.lstrip("-").split("=", 1)[0]


def _command_args(command: _Command, args: list[str]) -> list[str]:
    """Apply flag parsing for a command that defines no flags of its own."""
    if not args:
        return []
    first = args[0]
    if first == "--":
        return args[1:]
    if first == "-" or not first.startswith("-"):
        return args
    flag = _flag_name(first)
    if flag in _HELP_FLAGS:
        command.print_usage()
        raise _Exit(0)
    sys.stderr.write(f"flag provided but not defined: -{flag}\n")
    command.print_usage()
    raise _Exit(2)


def _run(args: list[str]) -> int:
    if not args:
        sys.stderr.write(USAGE_TEXT)
        return 2
    first = args[0]
    if first.startswith("-"):
        flag = _flag_name(first)
        if flag in _HELP_FLAGS:
            sys.stderr.write(USAGE_TEXT)
            return 0
        sys.stderr.write(f"flag provided but not defined: -{flag}\n{USAGE_TEXT}")
        return 2
    command = _COMMANDS.get(first)
    if command is None:
        sys.stderr.write(f"zgo {first}: unknown command\nRun 'zgo -h' for usage.\n")
        return 2
    try:
        command.handler(_command_args(command, args[1:]))
    except _Exit as stop:
        return stop.code
    except ZgoError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the zgo command line and return its exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    return _run(args)
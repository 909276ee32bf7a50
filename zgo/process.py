"""Running external commands and keeping git checkouts at a fixed revision."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
from typing import TextIO

from zgo.config import Config
from zgo.errors import ZgoError, wrap
from zgo.targets import SDK_DIR_NAME, format_cmd_line

SDK_REMOTE = "https://github.com/hexops/sdk-macos-13.3"
SDK_REVISION = "1615cd09b3a42ae590e05e63251a0e9fbc47bab5"


def _fileno(stream: TextIO) -> int | None:
    """Return the OS-level descriptor behind ``stream``, or None if it has none."""
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError, io.UnsupportedOperation):
        return None


def _env_dict(env: list[str]) -> dict[str, str]:
    result: dict[str, str] = {}
    for entry in env:
        key, _, value = entry.partition("=")
        result[key] = value
    return result


def _exit_description(code: int) -> str:
    if code >= 0:
        return f"exit status {code}"
    try:
        return f"signal: {signal.Signals(-code).name}"
    except ValueError:
        return f"signal: {-code}"


def execf(
    stream: TextIO,
    verbose: bool,
    env: list[str] | None,
    cwd: str | None,
    name: str,
    *args: str,
) -> None:
    """Run ``name`` with ``args``, sending its stdout and stderr to ``stream``.

    ``env`` is a list of ``KEY=VALUE`` strings, or None to inherit this
    process's environment; an empty ``cwd`` means the current directory.
    Raises ZgoError when the command cannot start or exits unsuccessfully.
    """
    cmd_line = format_cmd_line(name, *args)
    if verbose:
        stream.write(f"zgo: $ {cmd_line}\n")
    run_env = None if env is None else _env_dict(env)
    fd = _fileno(stream)
    try:
        if fd is None:
            result = subprocess.run(
                [name, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=run_env,
                cwd=cwd or None,
                check=False,
            )
            if result.stdout:
                stream.write(result.stdout.decode(errors="replace"))
        else:
            stream.flush()
            result = subprocess.run(
                [name, *args],
                stdout=fd,
                stderr=fd,
                env=run_env,
                cwd=cwd or None,
                check=False,
            )
    except OSError as exc:
        raise wrap(exc, cmd_line) from exc
    if result.returncode != 0:
        raise ZgoError(f"{cmd_line}: {_exit_description(result.returncode)}")


def ensure_cloned(remote_url: str, rev: str, dst_dir: str) -> None:
    """Make ``dst_dir`` a git checkout of ``remote_url`` at revision ``rev``."""
    if not os.path.exists(dst_dir):
        execf(sys.stderr, True, None, "", "git", "clone", "-c", "core.longpaths=true", remote_url, dst_dir)

    head_buf = io.StringIO()
    execf(head_buf, False, None, dst_dir, "git", "rev-parse", "HEAD")
    if head_buf.getvalue().strip() == rev:
        return

    try:
        execf(sys.stderr, True, None, dst_dir, "git", "reset", "--hard", rev)
    except ZgoError:
        # The revision may simply not be fetched yet.
        execf(sys.stderr, True, None, dst_dir, "git", "fetch")
        execf(sys.stderr, True, None, dst_dir, "git", "reset", "--hard", rev)


def ensure_xcode_sdk(cfg: Config) -> None:
    """Make sure the minimal macOS SDK is checked out under the config directory."""
    sdk_dir = os.path.join(cfg.dir, SDK_DIR_NAME)
    ensure_cloned(SDK_REMOTE, SDK_REVISION, sdk_dir)
"""Loading of the zgo.toml configuration and its environment fallbacks."""

from __future__ import annotations

import json
import os
import tomllib
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from zgo.errors import ZgoError, wrap

ZIG_INDEX_URL = "https://ziglang.org/download/index.json"
DEFAULT_DIR = ".zgo"

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# TOML key (lower-cased) -> (attribute name, expected type)
_FIELDS: dict[str, tuple[str, type]] = {
    "version": ("version", str),
    "verbose": ("verbose", bool),
    "dir": ("dir", str),
    "acceptxcodelicense": ("accept_xcode_license", bool),
}


@dataclass
class Config:
    """Settings controlling which Zig to use and where to keep downloads.

    ``version`` is a Zig version such as "0.11.0-dev.1615+f62e3b8c0", or
    "system" to use the zig found on PATH. ``dir`` is where the Zig binary
    and the macOS SDK are downloaded to.
    """

    version: str = ""
    verbose: bool = False
    dir: str = ""
    accept_xcode_license: bool = False


def _parse_bool(text: str | None) -> bool:
    """Parse a boolean the strict way; anything unrecognised counts as False."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return False


def _read_toml(file: str) -> dict[str, Any]:
    try:
        with open(file, "rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        raise ZgoError(f"{file}: {exc}") from exc


def _apply_toml(cfg: Config, data: dict[str, Any], file: str) -> None:
    for key, value in data.items():
        field = _FIELDS.get(key.lower())
        if field is None:
            continue
        attr, expected = field
        if type(value) is not expected:
            raise ZgoError(
                f"{file}: key {key!r} must be of type {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        setattr(cfg, attr, value)


def load_config(file: str = "zgo.toml") -> Config:
    """Load configuration from ``file`` (optional) and fill in defaults.

    Unset values fall back to ZGO_VERSION, ZGO_VERBOSE,
    ZGO_ACCEPT_XCODE_LICENSE and ZGO_DIR; with no version anywhere the
    latest nightly Zig version is queried, and the directory defaults to
    ".zgo".
    """
    cfg = Config()
    _apply_toml(cfg, _read_toml(file), file)

    if not cfg.version:
        cfg.version = os.environ.get("ZGO_VERSION", "")
        if not cfg.version:
            try:
                cfg.version = query_latest_nightly_zig_version()
            except (OSError, ValueError, ZgoError) as exc:
                raise wrap(exc, "querying latest nightly Zig version") from exc
    if not cfg.verbose:
        cfg.verbose = _parse_bool(os.environ.get("ZGO_VERBOSE"))
    if not cfg.accept_xcode_license:
        cfg.accept_xcode_license = _parse_bool(os.environ.get("ZGO_ACCEPT_XCODE_LICENSE"))
    if not cfg.dir:
        cfg.dir = os.environ.get("ZGO_DIR", "") or DEFAULT_DIR
    return cfg


def _get_ci(mapping: Any, key: str) -> Any:
    """Look up ``key`` in a JSON object, ignoring case; None when absent."""
    if not isinstance(mapping, dict):
        return None
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for name, value in mapping.items():
        if name.lower() == lowered:
            return value
    return None


def query_latest_nightly_zig_version() -> str:
    """Return the version of the latest nightly ("master") Zig build."""
    with urllib.request.urlopen(ZIG_INDEX_URL) as resp:
        data = json.load(resp)
    if not isinstance(data, dict):
        raise ZgoError("unexpected Zig download index: not a JSON object")
    version = _get_ci(_get_ci(data, "master"), "version")
    return version if isinstance(version, str) else ""
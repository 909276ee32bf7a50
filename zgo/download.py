"""Downloading and unpacking the Zig toolchain."""

from __future__ import annotations

import lzma
import os
import shutil
import sys
import tarfile
import urllib.error
import urllib.request
import zipfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import IO, BinaryIO

from zgo.config import Config
from zgo.errors import ZgoError, wrap
from zgo.targets import host_goarch, host_goos, strip_components, zig_arch, zig_os

ZIG_DOWNLOAD_URL = "https://pkg.machengine.org/zig/zig-{os}-{arch}-{version}.{ext}"


def ensure_zig_version(cfg: Config) -> str:
    """Return the path of the configured zig executable, downloading it if needed.

    With version "system" the zig on PATH must exist, and an empty path is
    returned.
    """
    if cfg.version == "system":
        path_to_zig = shutil.which("zig")
        if path_to_zig is None:
            raise ZgoError("zgo: zig is not installed (zgo is configured to use system Zig installation)")
        print(f"zgo: configured to use system Zig installation ({path_to_zig})", file=sys.stderr)
        return ""

    zig_dir = os.path.join(cfg.dir, "zig", cfg.version)
    if not os.path.exists(zig_dir):
        archive_tmp_path = os.path.join(cfg.dir, "zig", "download.tmp")
        download_extract_zig(cfg.version, zig_dir, archive_tmp_path)

    exe_ext = ".exe" if host_goos() == "windows" else ""
    return os.path.abspath(os.path.join(zig_dir, "zig" + exe_ext))


def _remove_all(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path, ignore_errors=True)
    else:
        try:
            os.remove(path)
        except OSError:
            pass


def download_extract_zig(version: str, dst: str, archive_tmp_path: str) -> None:
    """Download the Zig release ``version`` for this host and unpack it into ``dst``."""
    host_os = host_goos()
    if host_os == "windows":
        extension, strip = "zip", 0
    else:
        extension, strip = "tar.xz", 1
    tmp_path = f"{archive_tmp_path}.{extension}"
    url = ZIG_DOWNLOAD_URL.format(
        os=zig_os(host_os), arch=zig_arch(host_goarch()), version=version, ext=extension
    )
    _remove_all(tmp_path)
    try:
        os.makedirs(os.path.dirname(tmp_path) or ".", exist_ok=True)
    except OSError as exc:
        raise wrap(exc, "MkdirAll") from exc
    try:
        try:
            download_file(url, tmp_path)
        except ZgoError as exc:
            raise wrap(exc, "download") from exc
        try:
            extract_archive(tmp_path, dst, strip)
        except ZgoError as exc:
            raise wrap(exc, "extract") from exc
    finally:
        _remove_all(tmp_path)


def download_file(url: str, path: str) -> None:
    """Fetch ``url`` into the file at ``path``."""
    print(f"zgo: downloading: {url} > {path}", file=sys.stderr)
    try:
        out = open(path, "wb")
    except OSError as exc:
        raise wrap(exc, "Create") from exc
    with out:
        try:
            resp = urllib.request.urlopen(url)
        except urllib.error.HTTPError as exc:
            exc.close()
            raise ZgoError(f"bad response status: {exc.code} {exc.reason}") from exc
        except (OSError, ValueError) as exc:
            raise wrap(exc, "Get") from exc
        with resp:
            status = getattr(resp, "status", None)
            if status is not None and status != 200:
                raise ZgoError(f"bad response status: {status} {getattr(resp, 'reason', '')}")
            try:
                shutil.copyfileobj(resp, out)
            except OSError as exc:
                raise wrap(exc, "Copy") from exc


@dataclass(frozen=True)
class _Entry:
    name: str
    is_dir: bool
    mode: int
    open: Callable[[], IO[bytes]]


def _tar_entries(fileobj: BinaryIO, mode: str) -> Iterator[_Entry]:
    with tarfile.open(fileobj=fileobj, mode=mode) as tar:
        for member in tar:
            if member.isdir():
                yield _Entry(member.name, True, member.mode & 0o777, lambda: io_empty())
            elif member.isfile():
                yield _Entry(
                    member.name,
                    False,
                    member.mode & 0o777,
                    lambda m=member: tar.extractfile(m),
                )


def _zip_entries(fileobj: BinaryIO) -> Iterator[_Entry]:
    with zipfile.ZipFile(fileobj) as zf:
        for info in zf.infolist():
            is_dir = info.is_dir()
            mode = (info.external_attr >> 16) & 0o777 or (0o777 if is_dir else 0o666)
            yield _Entry(info.filename.rstrip("/"), is_dir, mode, lambda i=info: zf.open(i))


def io_empty() -> IO[bytes]:
    """Return an empty binary stream."""
    import io

    return io.BytesIO()


def _write_entry(entry: _Entry, dst: str, strip: int) -> None:
    dst_path = os.path.join(dst, strip_components(entry.name, strip))
    if entry.is_dir:
        try:
            os.makedirs(dst_path, exist_ok=True)
        except OSError as exc:
            raise wrap(exc, "MkdirAll") from exc
        return
    try:
        src = entry.open()
    except (OSError, KeyError) as exc:
        raise wrap(exc, "Open") from exc
    with src:
        try:
            os.makedirs(os.path.dirname(dst_path) or ".", exist_ok=True)
            out = open(dst_path, "wb")
        except OSError as exc:
            raise wrap(exc, "Create") from exc
        with out:
            try:
                shutil.copyfileobj(src, out)
            except OSError as exc:
                raise wrap(exc, "Copy") from exc
    try:
        os.chmod(dst_path, entry.mode)
    except OSError as exc:
        raise wrap(exc, "Chmod") from exc


def extract_archive(archive_path: str, dst: str, strip_path_components: int) -> None:
    """Unpack a .tar.gz, .tar.xz or .zip archive into ``dst``.

    The first ``strip_path_components`` components of each entry name are
    dropped.
    """
    print(f"zgo: extracting: {archive_path} > {dst}", file=sys.stderr)
    try:
        archive_file = open(archive_path, "rb")
    except OSError as exc:
        raise wrap(exc, "Open(archiveFilePath)") from exc
    with archive_file:
        if archive_path.endswith(".tar.gz"):
            entries = _tar_entries(archive_file, "r:gz")
        elif archive_path.endswith(".tar.xz"):
            entries = _tar_entries(archive_file, "r:xz")
        elif archive_path.endswith(".zip"):
            entries = _zip_entries(archive_file)
        else:
            raise ZgoError("unsupported archive format")
        try:
            for entry in entries:
                _write_entry(entry, dst, strip_path_components)
        except (ZgoError, tarfile.TarError, zipfile.BadZipFile, lzma.LZMAError, EOFError, OSError) as exc:
            raise wrap(exc, "Extract") from exc
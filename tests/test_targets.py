import os
from unittest.mock import patch

import pytest

from zgo.config import Config
from zgo.targets import (
    UnsupportedTargetError,
    enforce_path,
    format_cmd_line,
    go_build_flags,
    go_build_ld_flags,
    go_cc,
    go_cc_zig_flags,
    go_cxx,
    go_cxx_zig_flags,
    host_goarch,
    host_goos,
    strip_components,
    target_goarch,
    target_goos,
    xcode_sdk_dir,
    zig_arch,
    zig_os,
    zig_suffix,
    zig_target_triple,
)


@pytest.fixture
def target(monkeypatch):
    def set_target(goos, goarch):
        monkeypatch.setenv("GOOS", goos)
        monkeypatch.setenv("GOARCH", goarch)

    return set_target


def test_target_from_environment(target):
    target("windows", "arm64")
    assert target_goos() == "windows"
    assert target_goarch() == "arm64"


def test_target_defaults_to_host(monkeypatch):
    monkeypatch.delenv("GOOS", raising=False)
    monkeypatch.delenv("GOARCH", raising=False)
    assert target_goos() == host_goos()
    assert target_goarch() == host_goarch()


@pytest.mark.parametrize(
    "plat, expected", [("win32", "windows"), ("linux", "linux"), ("darwin", "darwin")]
)
def test_host_goos(plat, expected):
    with patch("sys.platform", plat):
        assert host_goos() == expected


@pytest.mark.parametrize(
    "machine, expected", [("AMD64", "amd64"), ("x86_64", "amd64"), ("aarch64", "arm64"), ("arm64", "arm64")]
)
def test_host_goarch(machine, expected):
    with patch("platform.machine", return_value=machine):
        assert host_goarch() == expected


def test_zig_names():
    assert zig_arch("amd64") == "x86_64"
    assert zig_arch("arm64") == "aarch64"
    assert zig_arch("386") == "386"
    assert zig_os("darwin") == "macos"
    assert zig_os("linux") == "linux"
    assert zig_suffix("linux") == "-musl"
    assert zig_suffix("windows") == "-gnu"
    assert zig_suffix("darwin") == ""


@pytest.mark.parametrize("func", [zig_os, zig_suffix])
def test_unsupported_goos(func):
    with pytest.raises(UnsupportedTargetError, match="unsupported GOOS"):
        func("plan9")


def test_unsupported_goarch():
    with pytest.raises(UnsupportedTargetError, match="unsupported GOARCH"):
        zig_arch("mips")


@pytest.mark.parametrize(
    "goos, goarch, triple",
    [
        ("linux", "amd64", "x86_64-linux-musl"),
        ("darwin", "arm64", "aarch64-macos"),
        ("windows", "amd64", "x86_64-windows-gnu"),
    ],
)
def test_zig_target_triple(target, goos, goarch, triple):
    target(goos, goarch)
    assert zig_target_triple() == triple


def test_linux_flags(target):
    target("linux", "amd64")
    cfg = Config(dir=".zgo")
    assert go_cc_zig_flags(cfg) == ""
    assert go_build_ld_flags() == ""
    assert go_build_flags() == []
    assert go_cc(cfg) == " ".join(["zig", "cc", "-target", zig_target_triple(), ""])
    assert go_cxx(cfg).startswith("zig c++ -target ")


def test_windows_flags(target):
    target("windows", "amd64")
    cfg = Config(dir=".zgo")
    assert go_cc_zig_flags(cfg) == "-Wno-dll-attribute-on-redeclaration"
    assert go_cxx_zig_flags(cfg) == "-Wno-dll-attribute-on-redeclaration"
    assert go_cc(cfg).endswith(" -Wno-dll-attribute-on-redeclaration")


def test_darwin_flags(target, tmp_path):
    target("darwin", "arm64")
    cfg = Config(dir=str(tmp_path))
    root = os.path.join(str(tmp_path), "sdk-macos-13.3", "root")
    frameworks = os.path.join(root, "System/Library/Frameworks")
    assert go_cc_zig_flags(cfg) == f"-F {frameworks} --sysroot {root}"
    assert go_cxx_zig_flags(cfg) == go_cc_zig_flags(cfg)
    assert go_build_ld_flags() == "-s -w -linkmode external"
    assert go_build_flags() == ["-buildmode=pie"]
    assert go_cxx(cfg).startswith("zig c++ -target " + zig_target_triple() + " -F ")


def test_unhandled_os_for_flags(target):
    target("plan9", "amd64")
    with pytest.raises(UnsupportedTargetError):
        go_build_flags()
    with pytest.raises(UnsupportedTargetError):
        go_build_ld_flags()
    with pytest.raises(UnsupportedTargetError):
        go_cc_zig_flags(Config(dir=".zgo"))


def test_xcode_sdk_dir_is_absolute(tmp_path):
    result = xcode_sdk_dir(Config(dir=str(tmp_path)))
    assert os.path.isabs(result)
    assert os.path.basename(result) == "sdk-macos-13.3"
    assert os.path.dirname(result) == os.path.abspath(str(tmp_path))


def test_format_cmd_line_quotes_spaces():
    assert format_cmd_line("go", "build", "-ldflags", "-s -w") == "go build -ldflags '-s -w'"


def test_format_cmd_line_name_only():
    assert format_cmd_line("git") == "git"


def test_enforce_path_prepends_directory():
    env = ["HOME=/home/x", "PATH=" + os.pathsep.join(["/usr/bin", "/bin"])]
    result = enforce_path(env, "/opt/zig")
    assert result[0] == "HOME=/home/x"
    assert result[1].startswith("PATH=")
    assert result[1][len("PATH="):].split(os.pathsep) == ["/opt/zig", "/usr/bin", "/bin"]


def test_enforce_path_without_path_leaves_env():
    env = ["HOME=/home/x", "LANG=C"]
    assert enforce_path(env, "/opt/zig") == env


def test_strip_components():
    path = os.sep.join(["zig-linux", "lib", "std.zig"])
    assert strip_components(path, 1) == os.sep.join(["lib", "std.zig"])
    assert strip_components(path, 0) == path


def test_strip_components_more_than_available():
    path = os.sep.join(["a", "b"])
    assert strip_components(path, 5) == path
    assert strip_components(path, 2) == ""
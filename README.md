# zgo

zgo builds Go packages with cgo enabled, using Zig as the C and C++
compiler. This lets you cross-compile for Linux, Windows and macOS from
any host.

## Installation

```
pip install .
```

Go must be on your `PATH`. Git is needed for macOS targets. Zig is
downloaded on demand unless you configure zgo to use the one on `PATH`.

## Usage

```
zgo build [go build arguments]
zgo -h
```

`build` is the only command. The target comes from `GOOS` and `GOARCH`.
When they are unset, the host platform is used.

| Supported | Values                        |
|-----------|-------------------------------|
| `GOOS`    | `linux`, `windows`, `darwin`  |
| `GOARCH`  | `amd64`, `arm64`, `386`       |

The Zig triple for each target:

- `linux` gets the `-musl` ABI.
- `windows` gets the `-gnu` ABI.
- `darwin` maps to `macos`.

Example:

```
GOOS=linux GOARCH=arm64 zgo build ./cmd/app
```

`zgo build` runs these steps in order:

1. Loads `zgo.toml` from the current directory, if the file exists.
2. For `darwin` targets, stops with an error unless the Xcode SDK licence is accepted. Once it is accepted, zgo clones a minimal macOS SDK into the zgo directory and pins it to a fixed revision with `git`.
3. Downloads and unpacks the configured Zig version for the host into `<dir>/zig/<version>`, if that directory does not exist yet.
4. Sets `CC` and `CXX` to `zig cc -target <triple> …` and `zig c++ -target <triple> …`.
5. Runs `zig build -Dtarget=<triple>` when a `build.zig` file is present.
6. Runs `go build` with the Zig directory first on `PATH`.

Target-specific link flags are added to `go build`:

- For `darwin`, zgo adds `-buildmode=pie` and `-ldflags "-s -w -linkmode external"`.
- If you pass your own `-ldflags`, zgo appends the target's flags to your value.

Exit status:

- `0` on success.
- `1` when a build step fails. The error message goes to standard error.
- `2` for usage errors, such as an unknown command or an unknown flag.

## Configuration

Example `zgo.toml`:

```toml
version = "0.11.0-dev.1615+f62e3b8c0"  # or "system" to use zig from PATH
verbose = true
dir = ".zgo"
acceptXCodeLicense = true
```

Key names are matched without regard to case. A value of the wrong type is an error.

A setting that is missing from the file, empty or `false` falls back to the environment:

| Setting              | Variable                   | Default            |
|----------------------|----------------------------|--------------------|
| `version`            | `ZGO_VERSION`              | latest Zig nightly |
| `verbose`            | `ZGO_VERBOSE`              | `false`            |
| `dir`                | `ZGO_DIR`                  | `.zgo`             |
| `acceptXCodeLicense` | `ZGO_ACCEPT_XCODE_LICENSE` | `false`            |

The boolean variables accept these values:

- True: `1`, `t`, `T`, `true`, `TRUE`, `True`
- False: `0`, `f`, `F`, `false`, `FALSE`, `False`

Anything else counts as false.

When `verbose` is on, the `CC` and `CXX` values are printed before the build.

## Library use

The building blocks can be imported:

- `zgo.config`: `load_config`, `Config`, `query_latest_nightly_zig_version`.
- `zgo.targets`:
  - Target mapping: `zig_target_triple`, `zig_os`, `zig_arch`, `zig_suffix`.
  - Compiler settings: `go_cc`, `go_cxx`, `go_build_flags`, `go_build_ld_flags`.
  - Helpers: `enforce_path`, `format_cmd_line`, `strip_components`.
- `zgo.download`: `ensure_zig_version`, `download_file`, `extract_archive`. `extract_archive` unpacks `.tar.gz`, `.tar.xz` and `.zip` archives.
- `zgo.process`: `execf`, `ensure_cloned`, `ensure_xcode_sdk`.
- `zgo.cli`: `compose_go_build_args`, `build`, `main`.

Errors are raised as `zgo.errors.ZgoError`. Unsupported targets raise its subclass `zgo.targets.UnsupportedTargetError`.
"""Build Go programs with cgo using Zig as the cross-compiling C/C++ toolchain."""

__version__ = "0.1.0"
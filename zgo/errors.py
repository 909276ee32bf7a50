"""Error type used throughout zgo and helpers for annotating errors."""

from __future__ import annotations


class ZgoError(Exception):
    """An error reported by zgo. Its text is the full, annotated message."""


def wrap(err: BaseException | None, msg: str) -> ZgoError | None:
    """Return a ZgoError reading ``"<msg>: <err>"``, or None when err is None."""
    if err is None:
        return None
    wrapped = ZgoError(f"{msg}: {err}")
    wrapped.__cause__ = err
    return wrapped


def wrapf(err: BaseException | None, fmt: str, *args: object) -> ZgoError | None:
    """Like wrap, with the message built by %-formatting ``fmt`` with ``args``."""
    if err is None:
        return None
    msg = fmt % args if args else fmt
    return wrap(err, msg)
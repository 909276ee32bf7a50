import pytest

from zgo.errors import ZgoError, wrap, wrapf


def test_wrap_none_is_none():
    assert wrap(None, "Open") is None


def test_wrapf_none_is_none():
    assert wrapf(None, "extract %s", "x") is None


def test_wrap_prefixes_message():
    original = ValueError("boom")
    wrapped = wrap(original, "Open")
    assert isinstance(wrapped, ZgoError)
    assert str(wrapped) == "Open: boom"
    assert wrapped.__cause__ is original


def test_wrap_nests():
    inner = wrap(OSError("boom"), "Open")
    outer = wrap(inner, "zgo")
    assert str(outer) == "zgo: Open: boom"
    assert outer.__cause__ is inner


def test_wrapf_formats_message():
    original = RuntimeError("boom")
    wrapped = wrapf(original, "extract %s to %s", "a.zip", "out")
    assert str(wrapped) == "extract a.zip to out: boom"
    assert wrapped.__cause__ is original


def test_wrapf_without_args():
    wrapped = wrapf(KeyError("k"), "lookup")
    assert str(wrapped).startswith("lookup: ")


def test_wrapped_error_can_be_raised():
    original = PermissionError("denied")
    wrapped = wrap(original, "Create")
    with pytest.raises(ZgoError, match="^Create: denied$") as info:
        raise wrapped
    assert info.value is wrapped
    assert info.value.__cause__ is original
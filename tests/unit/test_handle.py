from __future__ import annotations

import pytest

from pfmt.handle import Handle


class Resource:
    def __init__(self):
        self.closed = 0

    def close(self):
        self.closed += 1


@pytest.mark.unit
def test_borrowed_handle_is_never_released():
    resource = Resource()
    handle = Handle.borrowed(resource)
    with handle as value:
        assert value is resource
    assert not handle.is_owned
    assert not handle.released
    assert handle.value is resource
    assert resource.closed == 0


@pytest.mark.unit
def test_owned_handle_releases_once():
    resource = Resource()
    handle = Handle.owned(resource)
    with handle as value:
        assert value is resource
    assert handle.released
    handle.release()
    assert resource.closed == 1
    with pytest.raises(RuntimeError):
        handle.value


@pytest.mark.unit
def test_owned_handle_without_close():
    handle = Handle.owned(42)
    with handle as value:
        assert value == 42
    assert handle.released


@pytest.mark.unit
def test_owned_handle_is_released_when_the_body_raises():
    resource = Resource()
    with pytest.raises(ValueError):
        with Handle.owned(resource):
            raise ValueError("boom")
    assert resource.closed == 1


@pytest.mark.unit
def test_repr_shows_ownership():
    assert repr(Handle.borrowed(1)) == "Handle<borrowed>(1)"
    assert repr(Handle.owned(1)) == "Handle<owned>(1)"

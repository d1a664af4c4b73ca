import dataclasses

import pytest

from paginggrid.models.paging_state import Data, Error, FetchFailed, Loading


def _describe(state):
    return state.when(
        data=lambda items, is_loading_more, is_end_list: ("data", items, is_loading_more, is_end_list),
        loading=lambda: ("loading",),
        error=lambda error: ("error", error.cause),
    )


def test_when_dispatches_on_variant():
    cause = KeyError("missing")

    assert _describe(Loading()) == ("loading",)
    assert _describe(Data(["a"], True, False)) == ("data", ("a",), True, False)
    assert _describe(Error(FetchFailed(cause))) == ("error", cause)


def test_data_normalizes_items_and_flags():
    state = Data(["a", "a"], 0, 1)

    assert state.items == ("a", "a")
    assert state.is_loading_more is False
    assert state.is_end_list is True


def test_states_are_immutable():
    state = Data(["a"])

    with pytest.raises(dataclasses.FrozenInstanceError):
        state.items = ()


def test_copy_with_and_appended_keep_original():
    state = Data(["a"], is_loading_more=True)

    marked = state.copy_with(is_end_list=True)
    grown = state.appended(["b", "a"], is_end_list=False)

    assert marked == Data(("a",), True, True)
    assert grown == Data(("a", "b", "a"), False, False)
    assert state == Data(("a",), True, False)


def test_error_wraps_raw_exceptions():
    cause = OSError("disk")

    state = Error(cause)

    assert isinstance(state.error, FetchFailed)
    assert state.cause is cause
    assert repr(state.error) == "FetchFailed(OSError('disk'))"


def test_state_names():
    assert Loading().name == "loading"
    assert Data().name == "data"
    assert Error(ValueError()).name == "error"

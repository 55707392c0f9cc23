import pytest

from foliogen.tags import collect_tags, is_visible, reduce_tags, tag_query, tags_from_query, toggle


def test_toggle_adds_and_removes():
    state = toggle(frozenset(), "python")
    assert state == {"python"}
    assert toggle(state, "python") == frozenset()


@pytest.mark.parametrize("state", [frozenset(), frozenset({"a"}), frozenset({"a", "b"})])
@pytest.mark.parametrize("tag", ["a", "c"])
def test_toggle_is_its_own_inverse(state, tag):
    assert toggle(toggle(state, tag), tag) == state


def test_toggle_does_not_mutate_input():
    state = {"a"}
    toggle(state, "b")
    assert state == {"a"}


def test_reduce_tags_actions():
    state = reduce_tags(frozenset(), ("toggle", "a"))
    state = reduce_tags(state, ("toggle", "b"))
    assert state == {"a", "b"}
    assert reduce_tags(state, ("clear", None)) == frozenset()
    with pytest.raises(ValueError):
        reduce_tags(state, ("explode", "a"))


def test_empty_selection_shows_everything():
    assert is_visible([], frozenset())
    assert is_visible(["anything"], frozenset())


def test_visibility_is_logical_or():
    assert is_visible(["python", "web"], {"web", "rust"})
    assert not is_visible(["python"], {"rust"})
    assert not is_visible([], {"rust"})


def test_query_round_trip():
    assert tag_query(frozenset()) == ""
    query = tag_query({"web", "c++"})
    assert query == "?tag=c%2B%2B&tag=web"
    assert tags_from_query(query) == {"web", "c++"}
    assert tags_from_query("") == frozenset()
    assert tags_from_query({"tag": ["a", ""]}) == {"a"}


def test_collect_tags_keeps_first_seen_order(manifest):
    assert collect_tags(manifest) == ["python", "web", "rust"]

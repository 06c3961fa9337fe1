"""Tests for frame-synchronised scene state."""

import threading

from core.scene_state import EntryKind, SceneEntry, SceneState


def entry(key, kind=EntryKind.ASTEROID):
    return SceneEntry(kind, key, body=key)


def test_entries_appear_on_the_next_frame_in_append_order():
    state = SceneState()
    state.append(entry("a"))
    state.append(entry("b"))
    assert len(state) == 0

    published = state.begin_frame()
    assert [e.key for e in published] == ["a", "b"]
    assert [e.key for e in state.entries] == ["a", "b"]
    assert state.frame == 1

    state.append(entry("c"))
    assert [e.key for e in state.entries] == ["a", "b"]
    assert [e.key for e in state.begin_frame()] == ["c"]
    assert [e.key for e in state.entries] == ["a", "b", "c"]


def test_empty_frame_publishes_nothing():
    state = SceneState()
    assert state.begin_frame() == []
    assert state.frame == 1


def test_duplicate_keys_are_dropped():
    state = SceneState()
    assert state.append(entry("a"))
    assert not state.append(entry("a"))
    state.begin_frame()
    assert not state.append(entry("a"))
    assert state.extend([entry("a"), entry("b"), entry("b")]) == 1
    state.begin_frame()
    assert [e.key for e in state.entries] == ["a", "b"]


def test_by_kind_filters_visible_entries():
    state = SceneState()
    state.extend([
        entry("planet:1", EntryKind.PLANET),
        entry("moon:1", EntryKind.MOON),
        entry("asteroid:1"),
    ])
    assert state.by_kind(EntryKind.PLANET) == []
    state.begin_frame()
    assert [e.key for e in state.by_kind(EntryKind.MOON)] == ["moon:1"]


def test_concurrent_appends_are_all_published_once():
    state = SceneState()

    def worker(prefix):
        for i in range(200):
            state.append(entry(f"{prefix}:{i}"))

    threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
    for t in threads:
        t.start()
    published = []
    while any(t.is_alive() for t in threads):
        published.extend(state.begin_frame())
    for t in threads:
        t.join()
    published.extend(state.begin_frame())

    keys = [e.key for e in published]
    assert len(keys) == 800
    assert len(set(keys)) == 800
    # Per-producer order is preserved
    for prefix in "abcd":
        mine = [int(k.split(":")[1]) for k in keys if k.startswith(prefix)]
        assert mine == sorted(mine)

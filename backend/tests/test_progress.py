"""Progress store tests."""

import threading

from briefrec.services.progress import (
    COMPLETE,
    FAILED,
    InMemoryProgressStore,
    ProgressHandle,
    to_reading,
)


def test_advance_is_monotonic():
    store = InMemoryProgressStore()
    store.start("u1")
    store.advance("u1", 50)
    store.advance("u1", 25)
    assert store.peek("u1") == 50


def test_advance_clamps_to_complete():
    store = InMemoryProgressStore()
    store.advance("u1", 250)
    assert store.peek("u1") == COMPLETE


def test_failure_is_sticky_until_restart():
    store = InMemoryProgressStore()
    handle = ProgressHandle(store, "u1")
    handle.start()
    handle.fail()
    handle.report(80)
    assert store.peek("u1") == FAILED

    handle.start()
    assert store.peek("u1") == 0


def test_poll_keeps_in_flight_entries():
    store = InMemoryProgressStore()
    store.start("u1")
    store.advance("u1", 65)
    assert store.poll("u1") == 65
    assert store.poll("u1") == 65


def test_poll_removes_terminal_entries_once_read():
    store = InMemoryProgressStore()
    store.advance("done", COMPLETE)
    store.fail("broken")

    assert store.poll("done") == COMPLETE
    assert store.poll("done") is None
    assert store.poll("broken") == FAILED
    assert store.poll("broken") is None


def test_poll_all_reads_every_key():
    store = InMemoryProgressStore()
    store.advance("u1", 35)
    store.advance("u2", COMPLETE)

    assert store.poll_all() == {"u1": 35, "u2": COMPLETE}
    assert store.keys() == ["u1"]


def test_keys_are_independent_under_concurrent_writers():
    store = InMemoryProgressStore()

    def run(key):
        for percent in range(0, COMPLETE + 1, 5):
            store.advance(key, percent)

    threads = [threading.Thread(target=run, args=(f"u{i}",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.poll_all() == {f"u{i}": COMPLETE for i in range(8)}


def test_reading_flags():
    assert to_reading("u1", 40).model_dump() == {"user_id": "u1", "percent": 40, "failed": False, "done": False}
    assert to_reading("u1", COMPLETE).done
    failed = to_reading("u1", FAILED)
    assert failed.failed and failed.percent == 0

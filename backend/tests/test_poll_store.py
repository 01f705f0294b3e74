"""Unit tests for the in-memory poll store."""

import threading

import pytest

from livepoll.core.exceptions import NotFoundError, ValidationError
from livepoll.services.poll_store import PollStore

# ---------------------------------------------------------------------------
# create_poll
# ---------------------------------------------------------------------------


def test_create_poll_trims_and_starts_at_zero(store):
    poll = store.create_poll("  Pizza?  ", [" Yes ", "No", "   ", "", None, "Maybe"])

    assert poll.question == "Pizza?"
    assert [o.text for o in poll.options] == ["Yes", "No", "Maybe"]
    assert all(o.votes == 0 for o in poll.options)
    assert poll.id in store


def test_create_poll_ids_are_unique(store):
    ids = {store.create_poll("Q", ["a", "b"]).id for _ in range(200)}
    assert len(ids) == 200
    assert len(store) == 200


def test_create_poll_keeps_duplicate_options(store):
    poll = store.create_poll("Q", ["same", "same"])
    assert [o.text for o in poll.options] == ["same", "same"]


@pytest.mark.parametrize(
    "question, options",
    [
        ("", ["a", "b"]),
        ("   ", ["a", "b"]),
        (None, ["a", "b"]),
        ("Q", ["only one"]),
        ("Q", ["a", "   ", ""]),
        ("Q", []),
        ("Q", "a,b"),
        ("Q", None),
        ("Q", {"a": 1, "b": 2}),
        ("Q", ["a", 2]),
    ],
)
def test_create_poll_rejects_bad_input(store, question, options):
    with pytest.raises(ValidationError):
        store.create_poll(question, options)
    assert len(store) == 0


# ---------------------------------------------------------------------------
# get_poll
# ---------------------------------------------------------------------------


def test_get_poll_returns_copy(store, pizza_poll):
    fetched = store.get_poll(pizza_poll.id)
    fetched.options[0].votes = 99

    assert store.get_poll(pizza_poll.id).options[0].votes == 0


def test_get_poll_unknown_id(store):
    with pytest.raises(NotFoundError, match="Poll not found"):
        store.get_poll("missing")


# ---------------------------------------------------------------------------
# cast_vote
# ---------------------------------------------------------------------------


def test_cast_vote_counts_each_option(store):
    poll = store.create_poll("Q", ["a", "b", "c"])
    for index in [0, 2, 2, 0, 2]:
        store.cast_vote(poll.id, index)

    votes = [o.votes for o in store.get_poll(poll.id).options]
    assert votes == [2, 0, 3]


def test_cast_vote_returns_updated_snapshot(store, pizza_poll):
    updated = store.cast_vote(pizza_poll.id, 1)

    assert updated.options[1].votes == 1
    updated.options[1].votes = 50
    assert store.get_poll(pizza_poll.id).options[1].votes == 1


def test_cast_vote_accepts_whole_number_float(store, pizza_poll):
    updated = store.cast_vote(pizza_poll.id, 1.0)

    assert [o.votes for o in updated.options] == [0, 1]


@pytest.mark.parametrize("index", [-1, 2, 5, True, "0", 0.5, 2.0, float("nan"), None])
def test_cast_vote_invalid_index_is_noop(store, pizza_poll, index):
    assert store.cast_vote(pizza_poll.id, index) is None
    assert [o.votes for o in store.get_poll(pizza_poll.id).options] == [0, 0]


def test_cast_vote_unknown_poll_is_noop(store, pizza_poll):
    assert store.cast_vote("missing", 0) is None
    assert len(store) == 1


def test_concurrent_votes_are_not_lost():
    """Votes from many threads on the same poll must all be counted."""

    store = PollStore()
    poll = store.create_poll("Q", ["a", "b"])

    def vote_many():
        for _ in range(500):
            store.cast_vote(poll.id, 0)

    threads = [threading.Thread(target=vote_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get_poll(poll.id).options[0].votes == 4000
    assert store.get_poll(poll.id).options[1].votes == 0

from unittest.mock import AsyncMock, MagicMock

import pytest

from spacematch.matching import MatchNotifications, SeenMatchStore
from spacematch.models import Match


def _match(match_id):
    return Match(
        id=match_id,
        seeker_post_id="n",
        landlord_post_id="s",
        seeker_id="u1",
        landlord_id="u2",
        match_score=50,
    )


@pytest.fixture
def seen_path(tmp_path):
    return tmp_path / "profile" / "seen.json"


def test_everything_is_new_on_first_use(seen_path):
    store = SeenMatchStore(seen_path)
    matches = [_match("m1"), _match("m2")]

    seen, new = store.partition(matches)

    assert seen == []
    assert new == matches
    assert not seen_path.exists()


def test_mark_seen_persists_across_instances(seen_path):
    matches = [_match("m1"), _match("m2")]
    SeenMatchStore(seen_path).mark_seen(matches)

    seen, new = SeenMatchStore(seen_path).partition(matches + [_match("m3")])

    assert [m.id for m in seen] == ["m1", "m2"]
    assert [m.id for m in new] == ["m3"]


def test_mark_seen_is_idempotent(seen_path):
    store = SeenMatchStore(seen_path)
    matches = [_match("m1"), _match("m2")]

    once = store.mark_seen(matches)
    twice = store.mark_seen(matches)

    assert once == twice == {"m1", "m2"}


def test_mark_seen_never_removes(seen_path):
    store = SeenMatchStore(seen_path)
    store.mark_seen([_match("m1")])
    store.mark_seen([_match("m2")])

    assert store.load() == {"m1", "m2"}


@pytest.mark.parametrize("content", ["{not json", '{"m1": true}', "42", ""])
def test_corrupted_storage_reads_as_empty(seen_path, content):
    seen_path.parent.mkdir(parents=True)
    seen_path.write_text(content)
    store = SeenMatchStore(seen_path)

    assert store.load() == set()
    assert store.new_count([_match("m1")]) == 1


def test_corrupted_storage_is_replaced_on_mark(seen_path):
    seen_path.parent.mkdir(parents=True)
    seen_path.write_text("garbage")
    store = SeenMatchStore(seen_path)

    store.mark_seen([_match("m1")])

    assert store.load() == {"m1"}


def test_unwritable_storage_does_not_raise(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    store = SeenMatchStore(blocker / "seen.json")

    store.mark_seen([_match("m1")])

    assert store.load() == set()


def test_default_path_comes_from_settings(tmp_path):
    assert SeenMatchStore().path == tmp_path / "seen_matches.json"


@pytest.mark.asyncio
async def test_refresh_then_mark_seen_then_refresh(seen_path):
    client = MagicMock()
    client.get_user_matches = AsyncMock(return_value=[_match("m1"), _match("m2")])
    notifications = MatchNotifications(client, SeenMatchStore(seen_path))

    all_matches, new = await notifications.refresh("u1")
    assert [m.id for m in new] == ["m1", "m2"]

    notifications.mark_all_seen()
    assert notifications.new_matches == []

    all_matches, new = await notifications.refresh("u1")
    seen, _ = notifications.store.partition(all_matches)
    assert new == []
    assert {m.id for m in seen} == {"m1", "m2"}
    assert not {m.id for m in seen} & {m.id for m in new}


@pytest.mark.asyncio
async def test_counts(seen_path):
    client = MagicMock()
    client.get_user_matches = AsyncMock(return_value=[_match("m1"), _match("m2")])
    store = SeenMatchStore(seen_path)
    store.mark_seen([_match("m1")])

    assert await MatchNotifications(client, store).counts("u1") == (2, 1)


@pytest.mark.asyncio
async def test_counts_fail_open(seen_path):
    client = MagicMock()
    client.get_user_matches = AsyncMock(side_effect=ConnectionError("offline"))

    assert await MatchNotifications(client, SeenMatchStore(seen_path)).counts("u1") == (0, 0)

import random
from unittest.mock import MagicMock

import pytest

from spacematch.matching import MatchFinder
from spacematch.models import PostType

ALL_USER_TYPES = [
    "artist",
    "musician",
    "maker",
    "photographer",
    "craftsperson",
    "educator",
    "entrepreneur",
    "other",
]

# Size + Environment + Duration + Privacy: 45 puntos, 4 labels
FOUR_LABELS = {
    "sizeCategory": "large",
    "environment": "mixed",
    "duration": "weekly",
    "privacyLevel": "shared",
}


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.get_active_by_type.return_value = []
    return repo


@pytest.mark.asyncio
async def test_queries_opposite_type(repo, make_post):
    finder = MatchFinder(post_repo=repo)

    await finder.find_matches(make_post("need"))
    repo.get_active_by_type.assert_called_with(PostType.SPACE, limit=500)

    await finder.find_matches(make_post("space"))
    repo.get_active_by_type.assert_called_with(PostType.NEED, limit=500)


@pytest.mark.asyncio
async def test_community_post_is_not_matched(repo, make_post):
    result = await MatchFinder(post_repo=repo).find_matches(make_post("community"))

    assert result == []
    repo.get_active_by_type.assert_not_called()


@pytest.mark.asyncio
async def test_returns_candidate_summary(repo, make_post, base_attributes):
    need = make_post("need", author_id="seeker", attributes={**base_attributes, "hasParking": True})
    space = make_post(
        "space",
        author_id="landlord",
        attributes={**base_attributes, "hasParking": True},
        title="Sunny studio",
        authorName="Dana",
    )
    repo.get_active_by_type.return_value = [space]

    result = await MatchFinder(post_repo=repo).find_matches(need)

    assert len(result) == 1
    assert result[0].to_api_dict() == {
        "postId": space.id,
        "title": "Sunny studio",
        "authorName": "Dana",
        "score": 58,
        "matchingAttributes": [
            "Size",
            "Environment",
            "Duration",
            "Privacy",
            "Noise Level",
            "Parking",
        ],
    }
    assert result[0].author_id == "landlord"


@pytest.mark.asyncio
async def test_excludes_own_posts(repo, make_post, base_attributes):
    need = make_post("need", author_id="same-user", attributes=base_attributes)
    own_space = make_post("space", author_id="same-user", attributes=base_attributes)
    other_space = make_post("space", author_id="other-user", attributes=base_attributes)
    repo.get_active_by_type.return_value = [own_space, other_space]

    result = await MatchFinder(post_repo=repo).find_matches(need)

    assert [m.post_id for m in result] == [other_space.id]


@pytest.mark.asyncio
async def test_excludes_rejected_and_low_signal_pairs(repo, make_post, base_attributes):
    need = make_post(
        "need",
        author_id="seeker",
        attributes={**base_attributes, "adaAccessible": True, "location": "Brooklyn, NY"},
    )
    inaccessible = make_post("space", author_id="a", attributes=base_attributes)
    location_only = make_post(
        "space", author_id="b", attributes={"adaAccessible": True, "location": "Brooklyn, NY"}
    )
    repo.get_active_by_type.return_value = [inaccessible, location_only]

    result = await MatchFinder(post_repo=repo).find_matches(need)

    # location_only suma 23 puntos pero solo 2 labels
    assert result == []


@pytest.mark.asyncio
async def test_returns_top_ten_sorted_by_score(repo, make_post):
    need = make_post(
        "need",
        author_id="seeker",
        attributes={**FOUR_LABELS, "userTypes": ALL_USER_TYPES, "utilities": ["wifi", "gas"]},
    )
    spaces = []
    for i in range(11):
        attributes = dict(FOUR_LABELS, userTypes=ALL_USER_TYPES[: min(i, 8)])
        if i > 8:
            attributes["utilities"] = ["wifi", "gas"][: i - 8]
        spaces.append(make_post("space", author_id=f"landlord-{i}", attributes=attributes))
    random.Random(7).shuffle(spaces)
    repo.get_active_by_type.return_value = spaces

    result = await MatchFinder(post_repo=repo).find_matches(need)

    scores = [m.score for m in result]
    assert len(result) == 10
    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 45 + 40 + 4
    assert 45 not in scores


@pytest.mark.asyncio
async def test_ties_keep_fetch_order(repo, make_post, base_attributes):
    need = make_post("need", author_id="seeker", attributes=base_attributes)
    first = make_post("space", author_id="a", attributes=base_attributes)
    second = make_post("space", author_id="b", attributes=base_attributes)
    repo.get_active_by_type.return_value = [first, second]

    result = await MatchFinder(post_repo=repo).find_matches(need)

    assert [m.post_id for m in result] == [first.id, second.id]


@pytest.mark.asyncio
async def test_fetch_failure_returns_empty_list(repo, make_post):
    repo.get_active_by_type.side_effect = ConnectionError("store unreachable")

    result = await MatchFinder(post_repo=repo).find_matches(make_post("need"))

    assert result == []


@pytest.mark.asyncio
async def test_thresholds_can_be_overridden(repo, make_post):
    need = make_post("need", author_id="seeker", attributes={"location": "Brooklyn"})
    space = make_post("space", author_id="landlord", attributes={"location": "Brooklyn"})
    repo.get_active_by_type.return_value = [space]

    result = await MatchFinder(post_repo=repo, min_attributes=1).find_matches(need)

    assert [m.score for m in result] == [20]


@pytest.mark.asyncio
async def test_works_against_store_rows(post_repo, seed_posts, make_post, base_attributes):
    need = make_post("need", author_id="seeker", attributes=base_attributes)
    space = make_post("space", author_id="landlord", attributes=base_attributes)
    closed = make_post("space", author_id="landlord", attributes=base_attributes, status="closed")
    other_need = make_post("need", author_id="x", attributes=base_attributes)
    seed_posts(need, space, closed, other_need)

    result = await MatchFinder(post_repo=post_repo).find_matches(need)

    assert [m.post_id for m in result] == [space.id]

"""Tests for the genre-affinity recommender against a real database."""

import pytest

from app.adapters.recommender.genre_affinity import GenreAffinityRecommender
from app.domain.scoring import (
    CANDIDATE_POOL_LIMIT,
    FALLBACK_POOL_LIMIT,
    MAX_RECOMMENDATIONS,
    MIN_PRIMARY_RESULTS,
    POPULAR_REASON,
)


@pytest.mark.asyncio
async def test_user_without_read_books_gets_only_popular_books(session, factory, reader):
    genre = await factory.genre("Fantasy")
    for i in range(25):
        await factory.book(genre, title=f"Book {i}")

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert 0 < len(recs) <= MAX_RECOMMENDATIONS
    assert all(r.reason == POPULAR_REASON for r in recs)


@pytest.mark.asyncio
async def test_empty_catalog_returns_nothing(session, reader):
    assert await GenreAffinityRecommender(session).recommend(reader.id) == []


@pytest.mark.asyncio
async def test_popularity_ranking_uses_approved_ratings_and_shelf_counts(
    session, factory, reader
):
    genre = await factory.genre("Fantasy")
    other = await factory.user("Other")
    plain = await factory.book(genre, "Plain")
    rated = await factory.book(genre, "Rated")
    shelved = await factory.book(genre, "Shelved")

    await factory.review(other, rated, 4)
    await factory.review(reader, rated, 2, status="Pending")
    await factory.shelf(other, shelved, "wantToRead")

    recs = await GenreAffinityRecommender(session).recommend(reader.id)
    by_title = {r.title: r for r in recs}

    assert by_title["Rated"].avg_rating == 4.0
    assert by_title["Rated"].score == pytest.approx(2.0)
    assert by_title["Shelved"].shelved_count == 1
    assert by_title["Shelved"].score == pytest.approx(0.5)
    assert by_title["Plain"].score == 0.0
    assert [r.title for r in recs] == ["Rated", "Shelved", "Plain"]


@pytest.mark.asyncio
async def test_affinity_path_uses_top_three_genres_and_excludes_read_books(
    session, factory, reader
):
    genres = {name: await factory.genre(name) for name in ("A", "B", "C", "D")}
    read_counts = {"A": 5, "B": 3, "C": 3, "D": 1}
    read_ids = set()
    for name, n in read_counts.items():
        for i in range(n):
            book = await factory.book(genres[name], f"{name}-read-{i}")
            await factory.shelf(reader, book, "read")
            read_ids.add(book.id)

    unread = {}
    for name in genres:
        unread[name] = await factory.book(genres[name], f"{name}-unread")

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert not read_ids & {r.id for r in recs}
    affinity = [r for r in recs if r.reason != POPULAR_REASON]
    assert {r.genre for r in affinity} == {"A", "B", "C"}
    reasons = {r.genre: r.reason for r in affinity}
    assert reasons["A"] == "Matches your preference for A (5 books read)"
    assert reasons["B"] == "Matches your preference for B (3 books read)"

    # Fewer than 12 affinity results: topped up with popular books, each book once.
    ids = [r.id for r in recs]
    assert len(ids) == len(set(ids))
    assert unread["D"].id in ids
    assert next(r for r in recs if r.id == unread["D"].id).reason == POPULAR_REASON


@pytest.mark.asyncio
async def test_affinity_score_uses_user_mean_rating(session, factory, reader):
    genre = await factory.genre("Mystery")
    other = await factory.user("Other")
    for i in range(3):
        book = await factory.book(genre, f"read-{i}")
        await factory.shelf(reader, book, "read")
        await factory.review(reader, book, 4)
    candidate = await factory.book(genre, "candidate")
    await factory.review(other, candidate, 4)

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    [rec] = [r for r in recs if r.id == candidate.id]
    assert rec.reason == "Matches your preference for Mystery (3 books read)"
    assert rec.score == 3.0


@pytest.mark.asyncio
async def test_two_read_books_take_fallback_only(session, factory, reader):
    genre = await factory.genre("Poetry")
    for i in range(2):
        book = await factory.book(genre, f"read-{i}")
        await factory.shelf(reader, book, "read")
    await factory.book(genre, "unread")

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert [r.title for r in recs] == ["unread"]
    assert recs[0].reason == POPULAR_REASON


@pytest.mark.asyncio
async def test_recommendations_are_idempotent(session, factory, reader):
    genre = await factory.genre("Drama")
    for i in range(5):
        await factory.book(genre, f"b{i}")

    recommender = GenreAffinityRecommender(session)
    assert await recommender.recommend(reader.id) == await recommender.recommend(reader.id)


@pytest.mark.asyncio
async def test_affinity_pool_capped_at_oldest_fifty(session, factory, reader):
    genre = await factory.genre("Fantasy")
    other = await factory.user("Other")
    for i in range(3):
        book = await factory.book(genre, f"read-{i}")
        await factory.shelf(reader, book, "read")

    pool = [await factory.book(genre, f"pool-{i}") for i in range(CANDIDATE_POOL_LIMIT)]
    # Newer and more popular, so they would outrank the pool if they were scored.
    late = [await factory.book(genre, f"late-{i}") for i in range(5)]
    for book in late:
        await factory.shelf(other, book, "wantToRead")

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert len(recs) == MAX_RECOMMENDATIONS
    assert {r.id for r in recs} <= {b.id for b in pool}
    assert all(r.reason != POPULAR_REASON for r in recs)


@pytest.mark.asyncio
async def test_twelve_affinity_matches_skip_fallback(session, factory, reader, monkeypatch):
    fantasy = await factory.genre("Fantasy")
    poetry = await factory.genre("Poetry")
    other = await factory.user("Other")
    for i in range(3):
        book = await factory.book(fantasy, f"read-{i}")
        await factory.shelf(reader, book, "read")
    matches = [await factory.book(fantasy, f"match-{i}") for i in range(MIN_PRIMARY_RESULTS)]
    for i in range(5):
        popular = await factory.book(poetry, f"popular-{i}")
        await factory.shelf(other, popular, "read")

    pool_sizes = []
    original = GenreAffinityRecommender._candidates

    async def counting(self, exclude_ids, limit, genre_ids=None):
        pool_sizes.append(limit)
        return await original(self, exclude_ids, limit, genre_ids)

    monkeypatch.setattr(GenreAffinityRecommender, "_candidates", counting)
    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert pool_sizes == [CANDIDATE_POOL_LIMIT]
    assert {r.id for r in recs} == {b.id for b in matches}
    assert all(r.reason.startswith("Matches your preference for Fantasy") for r in recs)


@pytest.mark.asyncio
async def test_fallback_pool_capped_at_oldest_thirty(session, factory, reader):
    genre = await factory.genre("Drama")
    other = await factory.user("Other")
    pool = [await factory.book(genre, f"pool-{i}") for i in range(FALLBACK_POOL_LIMIT)]
    late = [await factory.book(genre, f"late-{i}") for i in range(5)]
    for book in late:
        await factory.shelf(other, book, "read")
        await factory.review(other, book, 5)

    recs = await GenreAffinityRecommender(session).recommend(reader.id)

    assert len(recs) == MAX_RECOMMENDATIONS
    assert {r.id for r in recs} <= {b.id for b in pool}
    assert all(r.reason == POPULAR_REASON for r in recs)

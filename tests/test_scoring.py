"""Unit tests for recommendation scoring."""

from uuid import uuid4

import pytest

from app.domain import scoring
from app.domain.scoring import CandidateBook, Recommendation


def _candidate(genre_id=None, genre="Fantasy", avg_rating=0.0, shelved_count=0, title="T"):
    return CandidateBook(
        id=uuid4(),
        title=title,
        author="A",
        genre_id=genre_id or uuid4(),
        genre=genre,
        cover_image="/c.jpg",
        avg_rating=avg_rating,
        shelved_count=shelved_count,
    )


def _rec(score, reason=scoring.POPULAR_REASON, book_id=None):
    return Recommendation(
        id=book_id or uuid4(),
        title="T",
        author="A",
        genre="G",
        cover_image="/c.jpg",
        avg_rating=0.0,
        shelved_count=0,
        score=score,
        reason=reason,
    )


def test_top_genres_by_frequency_with_first_seen_tie_break():
    a, b, c, d = uuid4(), uuid4(), uuid4(), uuid4()
    reads = [a, b, c, a, d, c, a, b, a, b, c, a]  # A:5, B:3, C:3, D:1
    counts = scoring.genre_frequency(reads)

    assert counts == {a: 5, b: 3, c: 3, d: 1}
    assert scoring.top_genres(counts) == [a, b, c]


def test_top_genres_tie_resolved_by_encounter_order():
    a, b, c, d = uuid4(), uuid4(), uuid4(), uuid4()
    counts = scoring.genre_frequency([d, c, b, a])
    assert scoring.top_genres(counts) == [d, c, b]


def test_affinity_score_with_matching_rating_and_no_shelves_is_three():
    assert scoring.affinity_score(4.0, 4.0, 0) == 3.0


def test_affinity_score_rewards_popularity_and_penalises_deviation():
    assert scoring.affinity_score(2.0, 4.0, 0) == pytest.approx(1.8)
    assert scoring.affinity_score(4.0, 4.0, 5) == pytest.approx(5.0)


def test_popularity_score():
    assert scoring.popularity_score(4.0, 6) == pytest.approx(5.0)
    assert scoring.popularity_score(0.0, 0) == 0.0


def test_mean_rating_default():
    assert scoring.mean_rating([], default=scoring.DEFAULT_USER_RATING) == 3.0
    assert scoring.mean_rating([5, 4]) == 4.5


def test_affinity_reason_names_genre_and_read_count():
    genre_id = uuid4()
    book = _candidate(genre_id=genre_id, genre="Sci-Fi", avg_rating=3.0)
    [rec] = scoring.score_affinity_candidates([book], {genre_id: 4}, user_mean=3.0)
    assert rec.reason == "Matches your preference for Sci-Fi (4 books read)"
    assert rec.score == 3.0


def test_affinity_candidates_sorted_and_capped():
    genre_id = uuid4()
    books = [_candidate(genre_id=genre_id, shelved_count=i) for i in range(25)]
    recs = scoring.score_affinity_candidates(books, {genre_id: 3}, user_mean=0.0)

    assert len(recs) == scoring.MAX_RECOMMENDATIONS
    scores = [r.score for r in recs]
    assert scores == sorted(scores, reverse=True)
    assert recs[0].shelved_count == 24


def test_popular_candidates_use_popular_reason():
    recs = scoring.score_popular_candidates([_candidate(avg_rating=5.0, shelved_count=1)])
    assert recs[0].reason == "Popular among readers"
    assert recs[0].score == pytest.approx(3.0)


def test_needs_fallback_below_twelve():
    assert scoring.needs_fallback([])
    assert scoring.needs_fallback([_rec(1.0)] * 11)
    assert not scoring.needs_fallback([_rec(1.0)] * 12)


def test_merge_dedupes_by_id_keeping_affinity_entry():
    shared = uuid4()
    primary = [_rec(3.0, reason="Matches your preference for X (3 books read)", book_id=shared)]
    fallback = [_rec(9.0, book_id=shared), _rec(1.0)]

    merged = scoring.merge_recommendations(primary, fallback)

    assert len(merged) == 2
    assert [r.id for r in merged].count(shared) == 1
    kept = next(r for r in merged if r.id == shared)
    assert kept.reason.startswith("Matches your preference")
    assert kept.score == 3.0


def test_merge_sorts_descending_and_truncates():
    primary = [_rec(float(i)) for i in range(10)]
    fallback = [_rec(float(i) + 0.5) for i in range(15)]
    merged = scoring.merge_recommendations(primary, fallback)

    assert len(merged) == scoring.MAX_RECOMMENDATIONS
    assert [r.score for r in merged] == sorted((r.score for r in merged), reverse=True)
    assert merged[0].score == 14.5


def test_merge_keeps_input_order_for_equal_scores():
    first, second = _rec(2.0), _rec(2.0)
    merged = scoring.merge_recommendations([first], [second])
    assert [r.id for r in merged] == [first.id, second.id]

"""
Recommendation scoring.

Pure functions over data already fetched from the database:

  Primary path   → genre affinity. The user's three most-read genres select the
                   candidate pool; candidates whose average rating sits close to
                   the user's own mean rating, and that many readers shelve,
                   score higher.
  Fallback path  → popularity. Used to top up the list whenever the primary
                   path produces fewer than MIN_PRIMARY_RESULTS entries.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence
from uuid import UUID

MIN_READ_FOR_AFFINITY = 3
TOP_GENRE_COUNT = 3
CANDIDATE_POOL_LIMIT = 50
FALLBACK_POOL_LIMIT = 30
MIN_PRIMARY_RESULTS = 12
MAX_RECOMMENDATIONS = 18
DEFAULT_USER_RATING = 3.0

AFFINITY_RATING_WEIGHT = 0.6
AFFINITY_POPULARITY_WEIGHT = 0.4
FALLBACK_RATING_WEIGHT = 0.5
FALLBACK_POPULARITY_WEIGHT = 0.5

POPULAR_REASON = "Popular among readers"


@dataclass(frozen=True)
class CandidateBook:
    """A book eligible for recommendation, with its aggregates resolved."""

    id: UUID
    title: str
    author: str
    genre_id: UUID
    genre: str
    cover_image: str
    avg_rating: float
    shelved_count: int


@dataclass(frozen=True)
class Recommendation:
    id: UUID
    title: str
    author: str
    genre: str
    cover_image: str
    avg_rating: float
    shelved_count: int
    score: float
    reason: str


def genre_frequency(genre_ids: Iterable[UUID]) -> dict[UUID, int]:
    """Count genres in encounter order."""
    counts: dict[UUID, int] = {}
    for genre_id in genre_ids:
        counts[genre_id] = counts.get(genre_id, 0) + 1
    return counts


def top_genres(counts: dict[UUID, int], n: int = TOP_GENRE_COUNT) -> list[UUID]:
    """Most frequent genres first; equal counts keep their encounter order."""
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [genre_id for genre_id, _ in ranked[:n]]


def mean_rating(ratings: Sequence[int], default: float = 0.0) -> float:
    if not ratings:
        return default
    return sum(ratings) / len(ratings)


def affinity_score(avg_rating: float, user_mean: float, shelved_count: int) -> float:
    return (
        (5 - abs(avg_rating - user_mean)) * AFFINITY_RATING_WEIGHT
        + shelved_count * AFFINITY_POPULARITY_WEIGHT
    )


def popularity_score(avg_rating: float, shelved_count: int) -> float:
    return (
        avg_rating * FALLBACK_RATING_WEIGHT
        + shelved_count * FALLBACK_POPULARITY_WEIGHT
    )


def affinity_reason(genre_name: str, books_read: int) -> str:
    return f"Matches your preference for {genre_name} ({books_read} books read)"


def _ranked(recs: Iterable[Recommendation], limit: int) -> list[Recommendation]:
    # sorted() is stable: equal scores keep their input order
    return sorted(recs, key=lambda r: r.score, reverse=True)[:limit]


def score_affinity_candidates(
    candidates: Sequence[CandidateBook],
    genre_counts: dict[UUID, int],
    user_mean: float,
) -> list[Recommendation]:
    """Score genre-matched candidates and keep the best MAX_RECOMMENDATIONS."""
    recs = [
        Recommendation(
            id=book.id,
            title=book.title,
            author=book.author,
            genre=book.genre,
            cover_image=book.cover_image,
            avg_rating=book.avg_rating,
            shelved_count=book.shelved_count,
            score=affinity_score(book.avg_rating, user_mean, book.shelved_count),
            reason=affinity_reason(book.genre, genre_counts.get(book.genre_id, 0)),
        )
        for book in candidates
    ]
    return _ranked(recs, MAX_RECOMMENDATIONS)


def score_popular_candidates(candidates: Sequence[CandidateBook]) -> list[Recommendation]:
    return [
        Recommendation(
            id=book.id,
            title=book.title,
            author=book.author,
            genre=book.genre,
            cover_image=book.cover_image,
            avg_rating=book.avg_rating,
            shelved_count=book.shelved_count,
            score=popularity_score(book.avg_rating, book.shelved_count),
            reason=POPULAR_REASON,
        )
        for book in candidates
    ]


def needs_fallback(primary: Sequence[Recommendation]) -> bool:
    return len(primary) < MIN_PRIMARY_RESULTS


def merge_recommendations(
    primary: Sequence[Recommendation],
    fallback: Sequence[Recommendation],
) -> list[Recommendation]:
    """
    Combine both paths into the final ranked list.

    A book present in both sets is kept once, with its genre-affinity entry.
    """
    seen = {rec.id for rec in primary}
    combined = list(primary) + [rec for rec in fallback if rec.id not in seen]
    return _ranked(combined, MAX_RECOMMENDATIONS)

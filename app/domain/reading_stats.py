"""Reading statistics: year-to-date counts, genre breakdown, streak and chart series."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

# Fixed labels so chart output does not depend on the process locale.
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

PAGES_WINDOW_DAYS = 30


@dataclass(frozen=True)
class ShelfSnapshot:
    """
    One shelf entry as seen by the aggregator.

    `updated_at` must already be expressed in the calendar the statistics are
    reported in (the same one as `now`).
    """

    shelf_type: str
    pages_read: int
    total_pages: int
    updated_at: datetime
    genre: Optional[str] = None


@dataclass
class ReadingStats:
    books_this_year: int = 0
    total_pages: int = 0
    avg_rating: float = 0.0
    total_books_read: int = 0
    favorite_genres: list[dict] = field(default_factory=list)
    reading_streak: int = 0
    monthly_books: list[dict] = field(default_factory=list)
    pages_over_time: list[dict] = field(default_factory=list)


def date_label(day: date) -> str:
    return f"{MONTH_LABELS[day.month - 1]} {day.day:02d}"


def _read_entries(shelves: Sequence[ShelfSnapshot]) -> list[ShelfSnapshot]:
    return [s for s in shelves if s.shelf_type == "read"]


def books_this_year(shelves: Sequence[ShelfSnapshot], now: datetime) -> int:
    return sum(1 for s in _read_entries(shelves) if s.updated_at.year == now.year)


def total_pages(shelves: Sequence[ShelfSnapshot]) -> int:
    return sum(s.total_pages or 0 for s in _read_entries(shelves))


def average_rating(ratings: Sequence[int]) -> float:
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)


def favorite_genres(shelves: Sequence[ShelfSnapshot]) -> list[dict]:
    """Genre counts across read books, most frequent first."""
    counts: dict[str, int] = {}
    for entry in _read_entries(shelves):
        if not entry.genre:
            continue
        counts[entry.genre] = counts.get(entry.genre, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "count": count} for name, count in ranked]


def reading_streak(shelves: Sequence[ShelfSnapshot]) -> int:
    """
    Consecutive distinct days with progress on a currently-reading book.

    Walks the newest update backwards: a repeat of the last counted day is
    skipped, a one-day step extends the streak, any wider gap ends it.
    """
    active = sorted(
        (s for s in shelves if s.shelf_type == "currentlyReading" and s.pages_read > 0),
        key=lambda s: s.updated_at,
        reverse=True,
    )
    if not active:
        return 0

    streak = 1
    last_day = active[0].updated_at.date()
    for entry in active[1:]:
        day = entry.updated_at.date()
        if day == last_day:
            continue
        if last_day - day == timedelta(days=1):
            streak += 1
            last_day = day
        else:
            break
    return streak


def monthly_books(shelves: Sequence[ShelfSnapshot], now: datetime) -> list[dict]:
    """Books finished per month of the current year, always twelve entries."""
    counts = [0] * 12
    for entry in _read_entries(shelves):
        if entry.updated_at.year == now.year:
            counts[entry.updated_at.month - 1] += 1
    return [{"month": label, "count": count} for label, count in zip(MONTH_LABELS, counts)]


def pages_over_time(shelves: Sequence[ShelfSnapshot], now: datetime) -> list[dict]:
    """Running total of pages read across entries touched in the last 30 days."""
    since = now - timedelta(days=PAGES_WINDOW_DAYS)
    recent = sorted(
        (s for s in shelves if s.updated_at >= since),
        key=lambda s: s.updated_at,
    )
    series = []
    cumulative = 0
    for entry in recent:
        cumulative += max(entry.pages_read or 0, 0)
        series.append({"date": date_label(entry.updated_at.date()), "pages": cumulative})
    return series


def compute_reading_stats(
    shelves: Sequence[ShelfSnapshot],
    review_ratings: Sequence[int],
    now: datetime,
) -> ReadingStats:
    """Aggregate every statistic for one user from their shelves and approved ratings."""
    return ReadingStats(
        books_this_year=books_this_year(shelves, now),
        total_pages=total_pages(shelves),
        avg_rating=average_rating(review_ratings),
        total_books_read=len(_read_entries(shelves)),
        favorite_genres=favorite_genres(shelves),
        reading_streak=reading_streak(shelves),
        monthly_books=monthly_books(shelves, now),
        pages_over_time=pages_over_time(shelves, now),
    )

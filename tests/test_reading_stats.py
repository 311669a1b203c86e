"""Unit tests for the reading statistics aggregator."""

from datetime import datetime, timedelta

from app.domain.reading_stats import (
    MONTH_LABELS,
    ShelfSnapshot,
    compute_reading_stats,
    date_label,
    favorite_genres,
    monthly_books,
    pages_over_time,
    reading_streak,
)

NOW = datetime(2024, 3, 20, 12, 0)


def read(updated_at, total_pages=0, genre=None, pages_read=0):
    return ShelfSnapshot("read", pages_read, total_pages, updated_at, genre)


def reading(updated_at, pages_read=10):
    return ShelfSnapshot("currentlyReading", pages_read, 300, updated_at)


def test_year_to_date_counts_and_pages():
    shelves = [
        read(datetime(2024, 3, 1), total_pages=100),
        read(datetime(2024, 3, 15), total_pages=50),
        read(datetime(2023, 12, 20), total_pages=75),
    ]
    stats = compute_reading_stats(shelves, [], NOW)

    assert stats.books_this_year == 2
    assert stats.total_pages == 225
    assert stats.total_books_read == 3


def test_empty_history_yields_zeroes():
    stats = compute_reading_stats([], [], NOW)

    assert stats.books_this_year == 0
    assert stats.total_pages == 0
    assert stats.avg_rating == 0
    assert stats.total_books_read == 0
    assert stats.favorite_genres == []
    assert stats.reading_streak == 0
    assert [m["count"] for m in stats.monthly_books] == [0] * 12
    assert stats.pages_over_time == []


def test_average_rating_rounded_to_one_decimal():
    stats = compute_reading_stats([], [5, 4, 4], NOW)
    assert stats.avg_rating == 4.3


def test_streak_counts_distinct_consecutive_days():
    day = datetime(2024, 3, 20, 9, 0)
    shelves = [
        reading(day),
        reading(day - timedelta(days=1, hours=2)),
        reading(day - timedelta(days=1, hours=5)),
        reading(day - timedelta(days=3)),
    ]
    assert reading_streak(shelves) == 2


def test_streak_ignores_entries_without_progress_or_on_other_shelves():
    day = datetime(2024, 3, 20)
    shelves = [
        reading(day, pages_read=0),
        read(day - timedelta(days=1)),
        reading(day - timedelta(days=2)),
        reading(day - timedelta(days=3)),
    ]
    assert reading_streak(shelves) == 2


def test_streak_sorts_newest_first():
    day = datetime(2024, 3, 20)
    shelves = [reading(day - timedelta(days=i)) for i in (2, 0, 1)]
    assert reading_streak(shelves) == 3


def test_streak_empty():
    assert reading_streak([]) == 0


def test_monthly_books_always_twelve_entries():
    shelves = [
        read(datetime(2024, 1, 5)),
        read(datetime(2024, 3, 1)),
        read(datetime(2024, 3, 2)),
        read(datetime(2023, 3, 2)),
        reading(datetime(2024, 2, 2)),
    ]
    months = monthly_books(shelves, NOW)

    assert len(months) == 12
    assert [m["month"] for m in months] == list(MONTH_LABELS)
    assert months[0]["count"] == 1
    assert months[1]["count"] == 0
    assert months[2]["count"] == 2


def test_favorite_genres_sorted_and_skips_unresolved():
    shelves = [
        read(NOW, genre="Fantasy"),
        read(NOW, genre="Horror"),
        read(NOW, genre="Horror"),
        read(NOW, genre=None),
        reading(NOW),
    ]
    assert favorite_genres(shelves) == [
        {"name": "Horror", "count": 2},
        {"name": "Fantasy", "count": 1},
    ]


def test_pages_over_time_is_cumulative_and_windowed():
    shelves = [
        reading(NOW - timedelta(days=40), pages_read=500),
        reading(NOW - timedelta(days=2), pages_read=30),
        read(NOW - timedelta(days=10), pages_read=120),
        ShelfSnapshot("wantToRead", 0, 0, NOW - timedelta(days=1)),
    ]
    series = pages_over_time(shelves, NOW)

    assert [p["pages"] for p in series] == [120, 150, 150]
    assert series[0]["date"] == "Mar 10"
    pages = [p["pages"] for p in series]
    assert all(a <= b for a, b in zip(pages, pages[1:]))


def test_date_label_is_locale_independent():
    assert date_label(datetime(2024, 12, 5).date()) == "Dec 05"


def test_aggregation_is_idempotent():
    shelves = [read(datetime(2024, 3, 1), 100, "Fantasy"), reading(datetime(2024, 3, 19))]
    first = compute_reading_stats(shelves, [4], NOW)
    second = compute_reading_stats(shelves, [4], NOW)
    assert first == second

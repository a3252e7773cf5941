"""Tests for statistical calculations and cross-PR summaries."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewstats.models import CommentCounts, PrStats, PullRequest
from reviewstats.stats import (
    average_duration,
    calculate_percentile,
    compute_statistics,
    summarize_author_prs,
    summarize_reviewer,
    summarize_reviews_for_author,
)


def _hours(value: float) -> timedelta:
    return timedelta(hours=value)


def _make_stats(
    number: int,
    author: str,
    initial: dict | None = None,
    approval: dict | None = None,
    comments: dict | None = None,
) -> PrStats:
    created = datetime(2022, 9, 5, 14, tzinfo=timezone.utc)
    return PrStats(
        pull_request=PullRequest(
            number=number,
            author=author,
            created_at=created,
            merged_at=created + timedelta(days=1),
            merged=True,
        ),
        ready_for_review_at=created,
        merged_at=created + timedelta(days=1),
        initial_response_time=initial or {},
        approval_time=approval or {},
        comments=comments or {},
    )


def _sample_stats():
    return [
        _make_stats(
            1,
            "author",
            initial={"alice": _hours(1), "bob": _hours(2)},
            approval={"alice": _hours(2), "bob": _hours(6)},
            comments={
                "alice": CommentCounts(issue_comments=1, code_review_comments=2),
                "author": CommentCounts(issue_comments=3),
            },
        ),
        _make_stats(
            2,
            "author",
            initial={"alice": _hours(3)},
            approval={"alice": _hours(4)},
            comments={"bob": CommentCounts(review_submission_comments=1)},
        ),
        _make_stats(
            3,
            "other",
            initial={"alice": _hours(1)},
            approval={"alice": _hours(9)},
        ),
        _make_stats(4, "author", initial={"carol": _hours(5)}),
    ]


def test_calculate_percentile_empty_returns_none():
    """Verify percentile calculation returns None when sample list is empty."""
    assert calculate_percentile([], 50) is None


def test_calculate_percentile_single_value_returns_same_for_common_percentiles():
    """Verify all common percentiles return the only value in a single-item sample."""
    values = [42.0]
    assert calculate_percentile(values, 50) == 42.0
    assert calculate_percentile(values, 75) == 42.0
    assert calculate_percentile(values, 90) == 42.0


def test_calculate_percentile_multiple_values_p50_p75_p90():
    """Verify linear interpolation percentile values for a multi-value sorted sample."""
    values = [10.0, 20.0, 30.0, 40.0]
    assert calculate_percentile(values, 50) == pytest.approx(25.0)
    assert calculate_percentile(values, 75) == pytest.approx(32.5)
    assert calculate_percentile(values, 90) == pytest.approx(37.0)


def test_calculate_percentile_out_of_range_raises():
    """Verify percentiles outside [0, 100] are rejected."""
    with pytest.raises(ValueError):
        calculate_percentile([1.0], 101)


def test_compute_statistics_filters_invalid_and_computes_summary():
    """Verify statistics ignore invalid samples and compute count and percentiles."""
    samples = [10.0, 20.0, None, -5.0, float("nan"), 30.0]
    stats = compute_statistics(samples)

    assert stats["count"] == 3
    assert stats["p50"] == pytest.approx(20.0)
    assert stats["p75"] == pytest.approx(25.0)
    assert stats["p90"] == pytest.approx(28.0)


def test_average_duration():
    """Verify the mean of working durations, with zero for no samples."""
    assert average_duration([]) == timedelta(0)
    assert average_duration([_hours(1), _hours(2), _hours(6)]) == _hours(3)


def test_summarize_reviewer_counts_only_approvals():
    """Verify a reviewer summary spans every PR the reviewer approved."""
    summary = summarize_reviewer("alice", _sample_stats())

    assert summary.total_reviews == 3
    assert summary.reviewed_prs == (1, 2, 3)
    assert summary.average_approval_time == _hours(5)
    assert summary.average_initial_response_time == timedelta(minutes=100)
    assert summary.total_comments == 3
    assert summary.reviewed_for == {"author": (1, 2), "other": (3,)}
    assert summary.approval_time_stats["count"] == 3
    assert summary.approval_time_stats["p50"] == pytest.approx(4 * 3600)


def test_summarize_reviewer_without_approvals():
    """Verify reviewers who never approved get an empty summary."""
    summary = summarize_reviewer("carol", _sample_stats())

    assert summary.total_reviews == 0
    assert summary.average_approval_time == timedelta(0)
    assert summary.approval_time_stats["p50"] is None


def test_summarize_reviews_for_author_sorts_by_review_count():
    """Verify reviewers of an author's PRs are listed with most reviews first."""
    summaries = summarize_reviews_for_author("author", _sample_stats())

    assert [(s.reviewer, s.total_reviews) for s in summaries] == [("alice", 2), ("bob", 1)]
    alice, bob = summaries
    assert alice.average_approval_time == _hours(3)
    assert alice.total_comments == 3
    assert alice.pr_numbers == (1, 2)
    assert bob.total_comments == 0
    assert bob.pr_numbers == (1,)


def test_summarize_author_prs_excludes_own_comments():
    """Verify an author summary counts only comments left by other users."""
    summary = summarize_author_prs("author", _sample_stats())

    assert summary.total_prs_created == 3
    assert summary.total_issue_comments == 1
    assert summary.total_code_review_comments == 2
    assert summary.total_review_submission_comments == 1
    assert not summary.is_empty()
    assert summarize_author_prs("nobody", _sample_stats()).is_empty()

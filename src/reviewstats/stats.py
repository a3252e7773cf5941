"""Aggregation of per-PR review stats across many pull requests.

This module provides utilities for:
- Computing linear-interpolation percentiles from pre-sorted samples.
- Aggregating common summary statistics (P50, P75, P90, count).
- Summarizing one reviewer's reviews across pull requests.
- Summarizing the reviews and comments an author's pull requests received.

All durations are working-hours ``timedelta`` values produced by the analyzer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, cast

from .models import CommentCounts, PrStats, UserId


def calculate_percentile(sorted_values: List[float], p: float) -> Optional[float]:
    """Calculate a percentile using linear interpolation.

    The input sequence is expected to already be sorted in ascending order.
    - Empty input returns ``None``.
    - ``p <= 0`` returns the first value.
    - ``p >= 100`` returns the last value.
    - Otherwise, percentile is linearly interpolated between adjacent ranks.

    Args:
        sorted_values: Sorted numeric samples.
        p: Percentile in the inclusive range ``[0, 100]``.

    Returns:
        Percentile value as ``float`` or ``None`` when input is empty.

    Raises:
        ValueError: If ``p`` is outside ``[0, 100]``.
    """
    if not 0 <= p <= 100:
        raise ValueError("Percentile 'p' must be in the range [0, 100].")

    if not sorted_values:
        return None

    if p <= 0:
        return sorted_values[0]

    if p >= 100:
        return sorted_values[-1]

    position = (len(sorted_values) - 1) * (p / 100.0)
    lower_index = math.floor(position)
    upper_index = math.ceil(position)

    if lower_index == upper_index:
        return sorted_values[int(position)]

    lower_value = sorted_values[lower_index]
    upper_value = sorted_values[upper_index]
    return lower_value + (upper_value - lower_value) * (position - lower_index)


def compute_statistics(samples: Iterable[Optional[float]]) -> Dict[str, Optional[float]]:
    """Compute P50, P75, P90, and sample count for duration samples in seconds.

    ``None``, NaN and negative values are ignored.

    Returns:
        Dictionary with keys ``p50``, ``p75``, ``p90``, and ``count``.
        Percentiles are ``None`` when no valid samples exist.
    """
    clean_samples = sorted(
        sample
        for sample in samples
        if sample is not None and not math.isnan(sample) and sample >= 0
    )

    return {
        "p50": calculate_percentile(clean_samples, 50),
        "p75": calculate_percentile(clean_samples, 75),
        "p90": calculate_percentile(clean_samples, 90),
        "count": cast(Optional[float], len(clean_samples)),
    }


def average_duration(durations: Sequence[timedelta]) -> timedelta:
    """Mean of ``durations``; zero for an empty sequence."""
    if not durations:
        return timedelta(0)
    return sum(durations, timedelta(0)) / len(durations)


@dataclass(frozen=True)
class ReviewerSummary:
    """Reviews done by one reviewer across pull requests.

    Only pull requests the reviewer approved count as reviews, matching
    :attr:`PrStats.approval_time`.
    """

    reviewer: UserId
    total_reviews: int
    average_approval_time: timedelta
    average_initial_response_time: timedelta
    approval_time_stats: Dict[str, Optional[float]]
    total_comments: int
    reviewed_prs: Tuple[int, ...] = ()
    reviewed_for: Mapping[UserId, Tuple[int, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthorReviewSummary:
    """Reviews one reviewer gave on one author's pull requests."""

    author: UserId
    reviewer: UserId
    average_approval_time: timedelta
    total_reviews: int
    total_comments: int
    pr_numbers: Tuple[int, ...] = ()


@dataclass(frozen=True)
class AuthorPrSummary:
    """Pull requests created by an author and the comments others left on them."""

    author: UserId
    total_prs_created: int
    total_issue_comments: int
    total_code_review_comments: int
    total_review_submission_comments: int

    def is_empty(self) -> bool:
        return (
            self.total_prs_created == 0
            and self.total_issue_comments == 0
            and self.total_code_review_comments == 0
            and self.total_review_submission_comments == 0
        )


def summarize_reviewer(reviewer: UserId, pr_stats: Iterable[PrStats]) -> ReviewerSummary:
    """Summarize every approval ``reviewer`` gave across ``pr_stats``."""
    approved = [stats for stats in pr_stats if reviewer in stats.approval_time]

    approval_times = [stats.approval_time[reviewer] for stats in approved]
    response_times = [
        stats.initial_response_time[reviewer]
        for stats in approved
        if reviewer in stats.initial_response_time
    ]

    reviewed_for: Dict[UserId, List[int]] = {}
    for stats in approved:
        reviewed_for.setdefault(stats.pull_request.author, []).append(stats.pull_request.number)

    return ReviewerSummary(
        reviewer=reviewer,
        total_reviews=len(approved),
        average_approval_time=average_duration(approval_times),
        average_initial_response_time=average_duration(response_times),
        approval_time_stats=compute_statistics(t.total_seconds() for t in approval_times),
        total_comments=sum(
            stats.comments[reviewer].total for stats in approved if reviewer in stats.comments
        ),
        reviewed_prs=tuple(stats.pull_request.number for stats in approved),
        reviewed_for={author: tuple(numbers) for author, numbers in reviewed_for.items()},
    )


def summarize_reviews_for_author(
    author: UserId,
    pr_stats: Iterable[PrStats],
) -> List[AuthorReviewSummary]:
    """Group approvals on ``author``'s pull requests by reviewer.

    Returns:
        One summary per reviewer, most reviews first.
    """
    by_reviewer: Dict[UserId, List[PrStats]] = {}
    for stats in pr_stats:
        if stats.pull_request.author != author:
            continue
        for reviewer in stats.approval_time:
            by_reviewer.setdefault(reviewer, []).append(stats)

    summaries = [
        AuthorReviewSummary(
            author=author,
            reviewer=reviewer,
            average_approval_time=average_duration(
                [stats.approval_time[reviewer] for stats in reviewed]
            ),
            total_reviews=len(reviewed),
            total_comments=sum(
                stats.comments[reviewer].total for stats in reviewed if reviewer in stats.comments
            ),
            pr_numbers=tuple(stats.pull_request.number for stats in reviewed),
        )
        for reviewer, reviewed in by_reviewer.items()
    ]
    return sorted(summaries, key=lambda summary: (-summary.total_reviews, summary.reviewer))


def summarize_author_prs(author: UserId, pr_stats: Iterable[PrStats]) -> AuthorPrSummary:
    """Count ``author``'s pull requests and the comments others made on them."""
    authored = [stats for stats in pr_stats if stats.pull_request.author == author]

    received: List[CommentCounts] = [
        counts
        for stats in authored
        for user, counts in stats.comments.items()
        if user != author
    ]

    return AuthorPrSummary(
        author=author,
        total_prs_created=len(authored),
        total_issue_comments=sum(counts.issue_comments for counts in received),
        total_code_review_comments=sum(counts.code_review_comments for counts in received),
        total_review_submission_comments=sum(
            counts.review_submission_comments for counts in received
        ),
    )

"""Per-reviewer review timings for a merged pull request.

This module walks a pull request's timeline to find, per reviewer:
- when the pull request became reviewable for them,
- when they first responded (approve, request changes or comment),
- when they approved,
and measures those spans in working hours in the reviewer's time zone. It
also tallies comments per user.

Timeline events must be supplied in chronological order.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Dict, Optional, Sequence, Set

from .adjusters import to_utc
from .models import CodeReviewComment, CommentCounts, PrStats, PullRequest, UserId
from .timeline import (
    COMMENT_STATES,
    RESPONSE_STATES,
    EventType,
    ReviewState,
    TimelineEvent,
    filter_events,
    review_requests_for,
    reviews_by,
)
from .working_hours import WorkingDurationCalculator

logger = logging.getLogger(__name__)

TimezoneLookup = Callable[[UserId], tzinfo]


def pr_ready_for_review_at(pr: PullRequest, events: Sequence[TimelineEvent]) -> datetime:
    """Return when the pull request became available for review.

    Pull requests opened as drafts become available at their first
    ``ready_for_review`` event; all others at creation time.
    """
    ready_events = filter_events(events, EventType.READY_FOR_REVIEW)
    if ready_events:
        return to_utc(ready_events[0].created_at)
    return to_utc(pr.created_at)


def pr_reviewers(pr: PullRequest, events: Sequence[TimelineEvent]) -> Set[UserId]:
    """Users who requested or were requested a review, or submitted one, minus the author."""
    reviewers: Set[UserId] = set()
    for event in events:
        if event.event_type == EventType.REVIEW_REQUESTED:
            reviewers.add(event.actor)
            if event.requested_reviewer:
                reviewers.add(event.requested_reviewer)
        elif event.event_type == EventType.REVIEWED:
            reviewers.add(event.user)

    reviewers.discard(pr.author)
    return reviewers


def reviewer_ready_at(
    reviewer: UserId,
    events: Sequence[TimelineEvent],
    ready_for_review_at: datetime,
) -> datetime:
    """Return the instant from which a reviewer's response time is measured.

    Business logic:
    - No review request for the reviewer: the pull request ready time.
    - The first request came after the reviewer's first review (they
      reviewed before being asked): the pull request ready time.
    - Otherwise: the time of the first request for the reviewer.
    """
    requests = review_requests_for(events, reviewer)
    if not requests:
        return ready_for_review_at

    first_request = requests[0]
    reviews = reviews_by(events, reviewer)
    if reviews and to_utc(first_request.created_at) > to_utc(reviews[0].submitted_at):
        return ready_for_review_at

    return to_utc(first_request.created_at)


def comments_by_user(
    events: Sequence[TimelineEvent],
    code_review_comments: Sequence[CodeReviewComment],
) -> Dict[UserId, CommentCounts]:
    """Count comments per user across the conversation, the diff and review submissions."""
    issue_comments: Counter = Counter()
    submission_comments: Counter = Counter()
    for event in events:
        if event.event_type == EventType.COMMENTED:
            issue_comments[event.user] += 1
        elif event.event_type == EventType.REVIEWED and event.state in COMMENT_STATES:
            submission_comments[event.user] += 1

    code_comments = Counter(comment.user for comment in code_review_comments)

    users = set(issue_comments) | set(code_comments) | set(submission_comments)
    return {
        user: CommentCounts(
            issue_comments=issue_comments[user],
            code_review_comments=code_comments[user],
            review_submission_comments=submission_comments[user],
        )
        for user in sorted(users)
    }


def analyze(
    pr: PullRequest,
    events: Sequence[TimelineEvent],
    code_review_comments: Sequence[CodeReviewComment],
    timezone_of: TimezoneLookup,
    calculator: Optional[WorkingDurationCalculator] = None,
) -> PrStats:
    """Compute review stats for one merged pull request.

    Reviewers without a response are absent from ``initial_response_time``;
    reviewers without an approval are absent from ``approval_time``.

    Args:
        pr: The merged pull request.
        events: Timeline events in chronological order.
        code_review_comments: Diff comments on the pull request.
        timezone_of: Maps a reviewer login to the zone of their business hours.
        calculator: Working hours calculator; defaults to the standard policy.

    Returns:
        Stats for the pull request.

    Raises:
        InvalidIntervalError: If a reviewer's first response precedes their
            ready time. Besides out-of-order input, this happens for a draft
            pull request reviewed before its ``ready_for_review`` event by a
            reviewer who was never requested.
    """
    calculator = calculator or WorkingDurationCalculator()
    ready_for_review_at = pr_ready_for_review_at(pr, events)

    initial_response_time: Dict[UserId, timedelta] = {}
    approval_time: Dict[UserId, timedelta] = {}

    for reviewer in sorted(pr_reviewers(pr, events)):
        reviews = reviews_by(events, reviewer)
        first_response = next((r for r in reviews if r.state in RESPONSE_STATES), None)
        if first_response is None:
            continue

        zone = timezone_of(reviewer)
        ready_at = reviewer_ready_at(reviewer, events, ready_for_review_at)

        initial_response_time[reviewer] = calculator.diff_working_hours(
            ready_at, first_response.submitted_at, zone
        )

        approval = next((r for r in reviews if r.state == ReviewState.APPROVED), None)
        if approval is not None:
            approval_time[reviewer] = calculator.diff_working_hours(
                ready_at, approval.submitted_at, zone
            )

        logger.debug(
            "Computed reviewer timings",
            extra={
                "pr_number": pr.number,
                "reviewer": reviewer,
                "zone": str(zone),
                "initial_response_seconds": initial_response_time[reviewer].total_seconds(),
                "approval_seconds": (
                    approval_time[reviewer].total_seconds() if reviewer in approval_time else None
                ),
            },
        )

    return PrStats(
        pull_request=pr,
        ready_for_review_at=ready_for_review_at,
        merged_at=to_utc(pr.merged_at) if pr.merged_at is not None else None,
        initial_response_time=initial_response_time,
        approval_time=approval_time,
        comments=comments_by_user(events, code_review_comments),
    )


class PrReviewTimelineAnalyzer:
    """Binds the time zone lookup and calculator for repeated :func:`analyze` calls."""

    def __init__(
        self,
        timezone_of: TimezoneLookup,
        calculator: Optional[WorkingDurationCalculator] = None,
    ) -> None:
        self._timezone_of = timezone_of
        self._calculator = calculator or WorkingDurationCalculator()

    def analyze(
        self,
        pr: PullRequest,
        events: Sequence[TimelineEvent],
        code_review_comments: Sequence[CodeReviewComment] = (),
    ) -> PrStats:
        return analyze(
            pr,
            events,
            code_review_comments,
            timezone_of=self._timezone_of,
            calculator=self._calculator,
        )

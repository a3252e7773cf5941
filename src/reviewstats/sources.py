"""Collaborator interface for pull request data and the batch analysis loop.

Fetching, caching and rate limiting live outside this package. Any object
satisfying :class:`PullRequestSource` can feed :func:`collect_pr_stats`.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from .analyzer import TimezoneLookup, analyze
from .models import CodeReviewComment, PrStats, PullRequest
from .timeline import TimelineEvent
from .working_hours import WorkingDurationCalculator

logger = logging.getLogger(__name__)


class PullRequestSource(Protocol):
    """Supplies already-decoded data for one pull request.

    Timeline events and code review comments must be returned in
    chronological order.
    """

    def pull_request(self, number: int) -> PullRequest:
        ...

    def timeline_events(self, number: int) -> Sequence[TimelineEvent]:
        ...

    def code_review_comments(self, number: int) -> Sequence[CodeReviewComment]:
        ...


def collect_pr_stats(
    source: PullRequestSource,
    pr_numbers: Iterable[int],
    timezone_of: TimezoneLookup,
    calculator: Optional[WorkingDurationCalculator] = None,
) -> List[PrStats]:
    """Analyze each merged pull request in ``pr_numbers``.

    Pull requests that are not merged are skipped. Errors raised by the
    source or the analyzer propagate to the caller and abort the batch,
    including ``InvalidIntervalError`` for a draft pull request reviewed
    before it was marked ready.

    Returns:
        Stats for merged pull requests, in input order.
    """
    calculator = calculator or WorkingDurationCalculator()
    results: List[PrStats] = []
    prs_total = 0
    prs_not_merged = 0

    for number in pr_numbers:
        prs_total += 1
        pr = source.pull_request(number)
        if not pr.merged or pr.merged_at is None:
            prs_not_merged += 1
            logger.debug(
                "Skipping review stats for pull request that is not merged",
                extra={"pr_number": number},
            )
            continue

        results.append(
            analyze(
                pr,
                source.timeline_events(number),
                source.code_review_comments(number),
                timezone_of=timezone_of,
                calculator=calculator,
            )
        )

    logger.info(
        "Collected PR review stats",
        extra={
            "prs_total": prs_total,
            "prs_analyzed": len(results),
            "prs_not_merged": prs_not_merged,
        },
    )

    return results

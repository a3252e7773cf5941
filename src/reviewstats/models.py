"""Domain models for pull request review stats.

Input models mirror the subset of GitHub REST payload fields that the review
analysis needs. Result models are immutable and built once per analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional

from .errors import DataValidationError

UserId = str


def parse_timestamp(value: Any) -> datetime:
    """Parse a GitHub ISO8601 timestamp into an aware UTC datetime.

    Raises:
        DataValidationError: If ``value`` is missing or not ISO8601.
    """
    if not value or not isinstance(value, str):
        raise DataValidationError(f"Expected an ISO8601 timestamp, got {value!r}.")

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise DataValidationError(f"Invalid ISO8601 timestamp {value!r}.") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def user_login(payload: Mapping[str, Any], key: str) -> UserId:
    """Return ``payload[key]["login"]``.

    Raises:
        DataValidationError: If the user object or its login is missing.
    """
    user = payload.get(key)
    if not isinstance(user, Mapping) or not user.get("login"):
        raise DataValidationError(f"Missing '{key}.login' in payload.")
    return str(user["login"])


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Represents the pull request metadata required for review stats."""

    number: int
    author: UserId
    created_at: datetime
    merged_at: Optional[datetime] = None
    merged: bool = False
    title: str = ""
    html_url: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PullRequest":
        """Build a pull request from a GitHub pull request payload.

        Search results do not carry the ``merged`` flag; it is then derived
        from ``merged_at``.
        """
        if "number" not in payload:
            raise DataValidationError("Missing 'number' in pull request payload.")

        merged_at_value = payload.get("merged_at")
        merged_at = parse_timestamp(merged_at_value) if merged_at_value else None
        merged = payload.get("merged")

        return cls(
            number=int(payload["number"]),
            author=user_login(payload, "user"),
            created_at=parse_timestamp(payload.get("created_at")),
            merged_at=merged_at,
            merged=bool(merged) if merged is not None else merged_at is not None,
            title=payload.get("title") or "",
            html_url=payload.get("html_url") or "",
        )


@dataclass(frozen=True, slots=True)
class CodeReviewComment:
    """A comment anchored to a portion of the pull request diff."""

    user: UserId
    created_at: datetime
    html_url: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CodeReviewComment":
        return cls(
            user=user_login(payload, "user"),
            created_at=parse_timestamp(payload.get("created_at")),
            html_url=payload.get("html_url") or "",
        )


@dataclass(frozen=True, slots=True)
class CommentCounts:
    """Comments made by one user on one pull request, by kind.

    - ``issue_comments``: plain conversation comments on the PR page.
    - ``code_review_comments``: comments on a portion of the diff.
    - ``review_submission_comments``: reviews submitted as "comment" or
      "request changes".
    """

    issue_comments: int = 0
    code_review_comments: int = 0
    review_submission_comments: int = 0

    @property
    def total(self) -> int:
        return self.issue_comments + self.code_review_comments + self.review_submission_comments


NO_COMMENTS = CommentCounts()


@dataclass(frozen=True, slots=True)
class PerReviewerStats:
    """Review timings and comment counts for one reviewer on one pull request.

    Durations are working time (business hours on working days). ``None``
    means the reviewer never responded or never approved.
    """

    reviewer: UserId
    initial_response_time: Optional[timedelta]
    approval_time: Optional[timedelta]
    comments: CommentCounts


def _readonly(values: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class PrStats:
    """Review stats for one merged pull request.

    Attributes:
        pull_request: The analyzed pull request.
        ready_for_review_at: When the pull request became available for review.
        merged_at: When the pull request was merged.
        initial_response_time: Reviewer to working time until first response.
        approval_time: Reviewer to working time until approval.
        comments: User to comment counts, for everyone who commented.
    """

    pull_request: PullRequest
    ready_for_review_at: datetime
    merged_at: Optional[datetime]
    initial_response_time: Mapping[UserId, timedelta] = field(default_factory=dict)
    approval_time: Mapping[UserId, timedelta] = field(default_factory=dict)
    comments: Mapping[UserId, CommentCounts] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "initial_response_time", _readonly(self.initial_response_time))
        object.__setattr__(self, "approval_time", _readonly(self.approval_time))
        object.__setattr__(self, "comments", _readonly(self.comments))

    @property
    def reviewers(self) -> FrozenSet[UserId]:
        """Users with a response or an approval on this pull request."""
        return frozenset(self.initial_response_time) | frozenset(self.approval_time)

    def reviewer_stats(self, reviewer: UserId) -> PerReviewerStats:
        return PerReviewerStats(
            reviewer=reviewer,
            initial_response_time=self.initial_response_time.get(reviewer),
            approval_time=self.approval_time.get(reviewer),
            comments=self.comments.get(reviewer, NO_COMMENTS),
        )

    @property
    def per_reviewer(self) -> Mapping[UserId, PerReviewerStats]:
        return MappingProxyType(
            {reviewer: self.reviewer_stats(reviewer) for reviewer in sorted(self.reviewers)}
        )

"""Pull request timeline events.

Events form a closed set of frozen dataclasses. Each one carries an
``event_type`` discriminant holding the GitHub timeline ``event`` string, so
callers select events by comparing that field rather than by class lookup.
See https://docs.github.com/en/rest/issues/timeline for the payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import DataValidationError
from .models import UserId, parse_timestamp, user_login


class EventType(str, Enum):
    """Timeline ``event`` discriminant values."""

    REVIEW_REQUESTED = "review_requested"
    REVIEWED = "reviewed"
    READY_FOR_REVIEW = "ready_for_review"
    COMMENTED = "commented"
    CLOSED = "closed"
    MERGED = "merged"
    UNKNOWN = "unknown"


class ReviewState(str, Enum):
    """Review states of a ``reviewed`` event."""

    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"
    COMMENTED = "commented"
    DISMISSED = "dismissed"


# States that count as a reviewer responding to the pull request.
RESPONSE_STATES = frozenset(
    {ReviewState.APPROVED, ReviewState.CHANGES_REQUESTED, ReviewState.COMMENTED}
)

# Review submissions that count as comments.
COMMENT_STATES = frozenset({ReviewState.CHANGES_REQUESTED, ReviewState.COMMENTED})


@dataclass(frozen=True, slots=True)
class ReviewRequestedEvent:
    """A review was requested, from a user or from a team.

    ``requested_reviewer`` is ``None`` when a team was requested instead.
    """

    actor: UserId
    requested_reviewer: Optional[UserId]
    created_at: datetime
    requested_team: Optional[str] = None
    event_type: EventType = field(default=EventType.REVIEW_REQUESTED, init=False)


@dataclass(frozen=True, slots=True)
class ReviewedEvent:
    """A review was submitted."""

    user: UserId
    state: ReviewState
    submitted_at: datetime
    html_url: str = ""
    event_type: EventType = field(default=EventType.REVIEWED, init=False)

    def __str__(self) -> str:
        return f"Reviewed ({self.state.value}) by `{self.user}` at {self.html_url}"


@dataclass(frozen=True, slots=True)
class ReadyForReviewEvent:
    """A draft pull request was marked ready for review."""

    actor: UserId
    created_at: datetime
    event_type: EventType = field(default=EventType.READY_FOR_REVIEW, init=False)


@dataclass(frozen=True, slots=True)
class CommentedEvent:
    """A plain conversation comment on the pull request."""

    user: UserId
    created_at: datetime
    event_type: EventType = field(default=EventType.COMMENTED, init=False)


@dataclass(frozen=True, slots=True)
class ClosedEvent:
    actor: UserId
    created_at: datetime
    event_type: EventType = field(default=EventType.CLOSED, init=False)


@dataclass(frozen=True, slots=True)
class MergedEvent:
    actor: UserId
    created_at: datetime
    event_type: EventType = field(default=EventType.MERGED, init=False)


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """Any timeline event not used for review stats."""

    raw_event: str = ""
    event_type: EventType = field(default=EventType.UNKNOWN, init=False)


TimelineEvent = Union[
    ReviewRequestedEvent,
    ReviewedEvent,
    ReadyForReviewEvent,
    CommentedEvent,
    ClosedEvent,
    MergedEvent,
    UnknownEvent,
]


def _parse_review_requested(payload: Mapping[str, Any]) -> ReviewRequestedEvent:
    reviewer = payload.get("requested_reviewer")
    team = payload.get("requested_team")
    return ReviewRequestedEvent(
        actor=user_login(payload, "actor"),
        requested_reviewer=user_login(payload, "requested_reviewer") if reviewer else None,
        created_at=parse_timestamp(payload.get("created_at")),
        requested_team=(team.get("slug") or team.get("name")) if isinstance(team, Mapping) else None,
    )


def _parse_reviewed(payload: Mapping[str, Any]) -> ReviewedEvent:
    raw_state = str(payload.get("state") or "").lower()
    try:
        state = ReviewState(raw_state)
    except ValueError as exc:
        raise DataValidationError(f"Unknown review state {payload.get('state')!r}.") from exc

    return ReviewedEvent(
        user=user_login(payload, "user"),
        state=state,
        submitted_at=parse_timestamp(payload.get("submitted_at")),
        html_url=payload.get("html_url") or "",
    )


def _parse_ready_for_review(payload: Mapping[str, Any]) -> ReadyForReviewEvent:
    return ReadyForReviewEvent(
        actor=user_login(payload, "actor"),
        created_at=parse_timestamp(payload.get("created_at")),
    )


def _parse_commented(payload: Mapping[str, Any]) -> CommentedEvent:
    return CommentedEvent(
        user=user_login(payload, "user" if payload.get("user") else "actor"),
        created_at=parse_timestamp(payload.get("created_at")),
    )


def _parse_closed(payload: Mapping[str, Any]) -> ClosedEvent:
    return ClosedEvent(
        actor=user_login(payload, "actor"),
        created_at=parse_timestamp(payload.get("created_at")),
    )


def _parse_merged(payload: Mapping[str, Any]) -> MergedEvent:
    return MergedEvent(
        actor=user_login(payload, "actor"),
        created_at=parse_timestamp(payload.get("created_at")),
    )


_PARSERS: Dict[str, Callable[[Mapping[str, Any]], TimelineEvent]] = {
    EventType.REVIEW_REQUESTED.value: _parse_review_requested,
    EventType.REVIEWED.value: _parse_reviewed,
    EventType.READY_FOR_REVIEW.value: _parse_ready_for_review,
    EventType.COMMENTED.value: _parse_commented,
    EventType.CLOSED.value: _parse_closed,
    EventType.MERGED.value: _parse_merged,
}


def parse_timeline_event(payload: Mapping[str, Any]) -> TimelineEvent:
    """Decode one GitHub timeline payload using its ``event`` field.

    Unrecognized event types decode to :class:`UnknownEvent`.

    Raises:
        DataValidationError: If a recognized event lacks required fields.
    """
    raw_event = str(payload.get("event") or "")
    parser = _PARSERS.get(raw_event)
    if parser is None:
        return UnknownEvent(raw_event=raw_event)
    return parser(payload)


def parse_timeline_events(payloads: Iterable[Mapping[str, Any]]) -> List[TimelineEvent]:
    return [parse_timeline_event(payload) for payload in payloads]


def filter_events(events: Iterable[TimelineEvent], event_type: EventType) -> List[TimelineEvent]:
    """Events whose discriminant equals ``event_type``, in their original order."""
    return [event for event in events if event.event_type == event_type]


def review_requests_for(events: Sequence[TimelineEvent], reviewer: UserId) -> List[ReviewRequestedEvent]:
    return [
        event
        for event in events
        if event.event_type == EventType.REVIEW_REQUESTED and event.requested_reviewer == reviewer
    ]


def reviews_by(events: Sequence[TimelineEvent], reviewer: UserId) -> List[ReviewedEvent]:
    return [
        event
        for event in events
        if event.event_type == EventType.REVIEWED and event.user == reviewer
    ]

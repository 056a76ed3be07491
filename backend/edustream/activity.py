from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from .schemas import DEFAULT_ACTIVITY_TIMESTAMP, ActivityEntry, AppState, EntityKind, display_name

ACTIVITY_LIMIT = 10

# kind -> (created, updated, removed)
_PHRASES = {
	EntityKind.STUDENTS: (
		"New student {name} registered",
		"Student {name} details updated",
		"Student {name} removed",
	),
	EntityKind.TEACHERS: (
		"New teacher {name} joined the faculty",
		"Teacher {name} profile updated",
		"Teacher {name} removed from faculty",
	),
	EntityKind.COURSES: (
		'New course "{name}" created',
		'Course "{name}" curriculum updated',
		'Course "{name}" has been archived',
	),
}


def created_message(kind: EntityKind, record) -> str:
	return _PHRASES[kind][0].format(name=display_name(record))


def updated_message(kind: EntityKind, record) -> str:
	return _PHRASES[kind][1].format(name=display_name(record))


def removed_message(kind: EntityKind, record) -> str:
	# Callers must pass the record captured before removal
	return _PHRASES[kind][2].format(name=display_name(record))


class ActivityRecorder:
	"""Prepends activity entries to an AppState, keeping the newest ``limit``."""

	def __init__(
		self,
		limit: int = ACTIVITY_LIMIT,
		*,
		clock_ns: Callable[[], int] = time.time_ns,
		now: Optional[Callable[[], datetime]] = None,
	) -> None:
		self._limit = limit
		self._clock_ns = clock_ns
		self._now = now or (lambda: datetime.now(timezone.utc))
		self._last_id = 0

	def next_id(self) -> str:
		stamp = self._clock_ns()
		if stamp <= self._last_id:
			stamp = self._last_id + 1
		self._last_id = stamp
		return str(stamp)

	def entry(self, message: str) -> ActivityEntry:
		return ActivityEntry(
			id=self.next_id(),
			message=message,
			timestamp=DEFAULT_ACTIVITY_TIMESTAMP,
			created_at=self._now(),
		)

	def record(self, state: AppState, message: str) -> AppState:
		entries = (self.entry(message),) + state.activities
		return state.with_activities(entries[: self._limit])

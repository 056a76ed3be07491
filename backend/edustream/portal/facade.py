from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ..activity import ActivityRecorder, created_message, removed_message, updated_message
from ..errors import NotFoundError
from ..schemas import (
	AppState,
	Course,
	CourseCreate,
	CoursePatch,
	EntityKind,
	Record,
	Student,
	StudentCreate,
	StudentPatch,
	Teacher,
	TeacherCreate,
	TeacherPatch,
)
from .persistence import StateAdapter
from .store import EntityStore

logger = logging.getLogger(__name__)


class MutationFacade:
	"""Single entry point for add/update/delete on students, teachers and courses.

	Each call runs under one lock: the adapter persists (remote) or assigns
	ids (local), the activity entry is prepended, the full state is committed,
	and only then is the new snapshot installed in the store. Any failure
	along the way propagates and leaves the store as it was.

	Updating or deleting an id that is not in the snapshot raises
	``NotFoundError`` without touching the store or the activity log. When
	the snapshot has the id but the remote store answers 404, the record is
	dropped from the snapshot (no activity entry) and the error re-raised.
	"""

	def __init__(
		self,
		store: EntityStore,
		recorder: ActivityRecorder,
		adapter: Callable[[], StateAdapter],
	) -> None:
		self._store = store
		self._recorder = recorder
		self._adapter = adapter
		self._lock = asyncio.Lock()

	# ---- students ----

	async def add_student(self, fields: StudentCreate) -> Student:
		return await self._add(EntityKind.STUDENTS, fields)

	async def update_student(self, student_id: str, patch: StudentPatch) -> Student:
		return await self._update(EntityKind.STUDENTS, student_id, patch)

	async def delete_student(self, student_id: str) -> Student:
		return await self._delete(EntityKind.STUDENTS, student_id)

	# ---- teachers ----

	async def add_teacher(self, fields: TeacherCreate) -> Teacher:
		return await self._add(EntityKind.TEACHERS, fields)

	async def update_teacher(self, teacher_id: str, patch: TeacherPatch) -> Teacher:
		return await self._update(EntityKind.TEACHERS, teacher_id, patch)

	async def delete_teacher(self, teacher_id: str) -> Teacher:
		return await self._delete(EntityKind.TEACHERS, teacher_id)

	# ---- courses ----

	async def add_course(self, fields: CourseCreate) -> Course:
		return await self._add(EntityKind.COURSES, fields)

	async def update_course(self, course_id: str, patch: CoursePatch) -> Course:
		return await self._update(EntityKind.COURSES, course_id, patch)

	async def delete_course(self, course_id: str) -> Course:
		return await self._delete(EntityKind.COURSES, course_id)

	# ---- shared ----

	async def _add(self, kind: EntityKind, fields) -> Record:
		fields = kind.create_type.model_validate(fields)
		async with self._lock:
			adapter = self._adapter()
			current = self._store.snapshot
			record = await adapter.create(kind, fields)
			state = current.with_records(kind, current.records(kind) + (record,))
			await self._commit(adapter, state, created_message(kind, record))
			return record

	async def _update(self, kind: EntityKind, record_id: str, patch) -> Record:
		patch = kind.patch_type.model_validate(patch)
		async with self._lock:
			adapter = self._adapter()
			current = self._store.snapshot
			existing = current.find(kind, record_id)
			if existing is None:
				raise NotFoundError(kind.label, record_id)
			try:
				record = await adapter.update(kind, existing, patch)
			except NotFoundError:
				self._forget(kind, record_id)
				raise
			state = current.with_records(
				kind,
				(record if r.id == record_id else r for r in current.records(kind)),
			)
			await self._commit(adapter, state, updated_message(kind, record))
			return record

	async def _delete(self, kind: EntityKind, record_id: str) -> Record:
		async with self._lock:
			adapter = self._adapter()
			current = self._store.snapshot
			existing = current.find(kind, record_id)
			if existing is None:
				raise NotFoundError(kind.label, record_id)
			# Message is built from the record as it was before removal
			message = removed_message(kind, existing)
			try:
				await adapter.delete(kind, existing)
			except NotFoundError:
				self._forget(kind, record_id)
				raise
			state = current.with_records(kind, (r for r in current.records(kind) if r.id != record_id))
			await self._commit(adapter, state, message)
			return existing

	async def _commit(self, adapter: StateAdapter, state: AppState, message: str) -> None:
		state = self._recorder.record(state, message)
		await adapter.commit(state)
		self._store.replace(state)
		logger.debug("committed: %s", message)

	def _forget(self, kind: EntityKind, record_id: str) -> None:
		# The persisting store no longer has it, so neither does the snapshot
		current = self._store.snapshot
		self._store.replace(current.with_records(kind, (r for r in current.records(kind) if r.id != record_id)))
		logger.info("%s %s is gone upstream, dropped from snapshot", kind.label, record_id)

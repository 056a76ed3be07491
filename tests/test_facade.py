import asyncio
from random import Random

import pytest

from edustream.activity import ACTIVITY_LIMIT, ActivityRecorder
from edustream.errors import ConnectivityStateError, NotFoundError
from edustream.portal import EntityStore, JsonSlotStore, LocalStateAdapter, MutationFacade, PortalSession
from edustream.schemas import AppState, CourseCreate, CoursePatch, StudentCreate, StudentPatch, TeacherPatch
from edustream.seed import DEMO_STATE


def _facade(adapter, state: AppState = DEMO_STATE):
	store = EntityStore(state)
	return store, MutationFacade(store, ActivityRecorder(), lambda: adapter)


def test_add_student_registers_and_logs(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)
	before = len(store.snapshot.students)

	student = asyncio.run(
		facade.add_student(StudentCreate(name="Zoe", email="z@x.com", level="Beginner", status="Active"))
	)

	assert len(store.snapshot.students) == before + 1
	assert store.snapshot.students[-1] == student
	assert store.snapshot.activities[0].message == "New student Zoe registered"


def test_add_accepts_wire_payloads(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)

	course = asyncio.run(facade.add_course({"title": "Optics", "teacherId": "t9", "studentsCount": 4}))

	assert course.teacher_id == "t9"
	assert course.students_count == 4
	# Dangling teacher references are allowed
	assert store.snapshot.courses[-1] == course


def test_update_merges_only_given_fields(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)
	original = store.snapshot.students[0]

	updated = asyncio.run(facade.update_student(original.id, StudentPatch(level="Advance")))

	assert updated.level == "Advance"
	assert updated.name == original.name
	assert updated.email == original.email
	assert updated.status == original.status
	assert store.snapshot.students[0] == updated
	assert store.snapshot.activities[0].message == f"Student {original.name} details updated"


def test_update_missing_record_raises_and_leaves_state(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)
	before = store.snapshot

	with pytest.raises(NotFoundError) as exc_info:
		asyncio.run(facade.update_teacher("nope", TeacherPatch(name="X")))

	assert exc_info.value.record_id == "nope"
	assert store.snapshot is before


def test_deleted_record_is_never_resurrected(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)
	target = store.snapshot.students[1]

	async def scenario():
		await facade.delete_student(target.id)
		after_delete = store.snapshot
		with pytest.raises(NotFoundError):
			await facade.update_student(target.id, StudentPatch(name="Back"))
		with pytest.raises(NotFoundError):
			await facade.delete_student(target.id)
		return after_delete

	after_delete = asyncio.run(scenario())

	assert store.snapshot is after_delete
	assert all(s.id != target.id for s in store.snapshot.students)
	assert store.snapshot.activities[0].message == f"Student {target.name} removed"


def test_delete_course_names_the_removed_course(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)

	removed = asyncio.run(facade.delete_course("c2"))

	assert removed.title == "Calculus III"
	assert store.snapshot.activities[0].message == 'Course "Calculus III" has been archived'


def test_course_teacher_can_be_cleared(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)

	course = asyncio.run(facade.update_course("c1", CoursePatch(teacher_id=None)))

	assert course.teacher_id is None
	assert course.title == "Advanced React Patterns"


def test_activity_log_is_capped(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter)

	async def scenario():
		for i in range(ACTIVITY_LIMIT + 1):
			await facade.add_course(CourseCreate(title=f"Course {i}"))

	asyncio.run(scenario())

	messages = [a.message for a in store.snapshot.activities]
	assert len(messages) == ACTIVITY_LIMIT
	assert messages[0] == f'New course "Course {ACTIVITY_LIMIT}" created'
	assert messages[-1] == 'New course "Course 1" created'


def test_membership_matches_applied_operations(local_adapter: LocalStateAdapter) -> None:
	store, facade = _facade(local_adapter, AppState())
	rng = Random(7)
	expected = {}

	async def scenario():
		for step in range(60):
			action = rng.choice(["add", "add", "update", "delete", "missing"])
			if action == "add" or not expected:
				student = await facade.add_student(StudentCreate(name=f"S{step}", email=f"s{step}@x.com"))
				expected[student.id] = student.name
			elif action == "update":
				target = rng.choice(sorted(expected))
				await facade.update_student(target, StudentPatch(name=f"U{step}"))
				expected[target] = f"U{step}"
			elif action == "delete":
				target = rng.choice(sorted(expected))
				await facade.delete_student(target)
				del expected[target]
			else:
				with pytest.raises(NotFoundError):
					await facade.delete_student("missing")

	asyncio.run(scenario())

	assert {s.id: s.name for s in store.snapshot.students} == expected


def test_commits_are_written_to_the_slot(slots: JsonSlotStore) -> None:
	adapter = LocalStateAdapter(slots)

	async def scenario():
		store, facade = _facade(adapter, await adapter.load())
		await facade.add_teacher({"name": "Ada", "email": "ada@x.com", "department": "CS", "expertise": "Engines"})
		return store.snapshot, await LocalStateAdapter(slots).load()

	in_memory, on_disk = asyncio.run(scenario())

	assert on_disk == in_memory


class _BrokenSlot(LocalStateAdapter):
	async def commit(self, state: AppState) -> None:
		raise OSError("disk full")


def test_failed_commit_leaves_state_untouched(slots: JsonSlotStore) -> None:
	store, facade = _facade(_BrokenSlot(slots))
	before = store.snapshot

	with pytest.raises(OSError):
		asyncio.run(facade.add_student(StudentCreate(name="Zoe", email="z@x.com")))

	assert store.snapshot is before


def test_mutations_require_a_ready_connection(portal_settings) -> None:
	async def scenario():
		session = PortalSession(portal_settings)
		try:
			await session.records.add_student(StudentCreate(name="Zoe", email="z@x.com"))
		finally:
			await session.close()

	with pytest.raises(ConnectivityStateError):
		asyncio.run(scenario())


def test_zero_activity_limit_still_commits(local_adapter: LocalStateAdapter) -> None:
	store = EntityStore(DEMO_STATE)
	facade = MutationFacade(store, ActivityRecorder(limit=0), lambda: local_adapter)

	student = asyncio.run(facade.add_student(StudentCreate(name="Zoe", email="z@x.com")))

	assert store.snapshot.students[-1] == student
	assert store.snapshot.activities == ()

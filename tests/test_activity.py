from edustream.activity import (
	ACTIVITY_LIMIT,
	ActivityRecorder,
	created_message,
	removed_message,
	updated_message,
)
from edustream.schemas import AppState, Course, EntityKind, Student, Teacher


def test_record_prepends_entry() -> None:
	recorder = ActivityRecorder()
	state = recorder.record(AppState(), "first")
	state = recorder.record(state, "second")

	assert [a.message for a in state.activities] == ["second", "first"]
	assert state.activities[0].timestamp == "Just now"
	assert state.activities[0].created_at is not None


def test_log_keeps_only_most_recent_entries() -> None:
	recorder = ActivityRecorder()
	state = AppState()
	for i in range(ACTIVITY_LIMIT + 5):
		state = recorder.record(state, f"event {i}")

	messages = [a.message for a in state.activities]
	assert len(messages) == ACTIVITY_LIMIT
	assert messages == [f"event {i}" for i in range(ACTIVITY_LIMIT + 4, 4, -1)]


def test_ids_increase_even_when_clock_stalls() -> None:
	recorder = ActivityRecorder(clock_ns=lambda: 1_000)

	ids = [int(recorder.next_id()) for _ in range(5)]

	assert ids == [1_000, 1_001, 1_002, 1_003, 1_004]


def test_messages_use_display_names() -> None:
	student = Student(id="s", name="Zoe", email="z@x.com")
	teacher = Teacher(id="t", name="Dr. Who", email="who@x.com")
	course = Course(id="c", title="Time Travel")

	assert created_message(EntityKind.STUDENTS, student) == "New student Zoe registered"
	assert updated_message(EntityKind.STUDENTS, student) == "Student Zoe details updated"
	assert removed_message(EntityKind.STUDENTS, student) == "Student Zoe removed"
	assert created_message(EntityKind.TEACHERS, teacher) == "New teacher Dr. Who joined the faculty"
	assert removed_message(EntityKind.TEACHERS, teacher) == "Teacher Dr. Who removed from faculty"
	assert created_message(EntityKind.COURSES, course) == 'New course "Time Travel" created'
	assert updated_message(EntityKind.COURSES, course) == 'Course "Time Travel" curriculum updated'
	assert removed_message(EntityKind.COURSES, course) == 'Course "Time Travel" has been archived'

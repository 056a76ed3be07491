"""
Record schemas shared by the API server and the portal data-access layer.

Field names are snake_case in Python and camelCase on the wire and in the
local slot (``teacherId``, ``studentsCount``, ``createdAt``).

Records and the AppState aggregate are frozen: a mutation always produces a
new value, never an in-place edit.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Iterable, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Level = Literal["Beginner", "Intermediate", "Advance"]
Status = Literal["Active", "Inactive"]

UNASSIGNED = "Unassigned"
DEFAULT_ACTIVITY_TIMESTAMP = "Just now"


class CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	def to_wire(self) -> dict:
		return self.model_dump(mode="json", by_alias=True)


# ---- create payloads (no id) ----

class StudentCreate(CamelModel):
	name: str
	email: str
	level: Level = "Beginner"
	status: Status = "Active"


class TeacherCreate(CamelModel):
	name: str
	email: str
	department: str = ""
	expertise: str = ""


class CourseCreate(CamelModel):
	title: str
	description: str = ""
	# Soft reference, not checked against the teacher collection
	teacher_id: Optional[str] = None
	students_count: int = Field(default=0, ge=0)


# ---- stored records ----

class Student(StudentCreate):
	model_config = ConfigDict(frozen=True, from_attributes=True)
	id: str


class Teacher(TeacherCreate):
	model_config = ConfigDict(frozen=True, from_attributes=True)
	id: str


class Course(CourseCreate):
	model_config = ConfigDict(frozen=True, from_attributes=True)
	id: str


Record = Union[Student, Teacher, Course]


class ActivityEntry(CamelModel):
	model_config = ConfigDict(frozen=True, from_attributes=True)
	id: str
	message: str
	timestamp: str = DEFAULT_ACTIVITY_TIMESTAMP
	created_at: Optional[datetime] = None


# ---- partial updates ----

class RecordPatch(CamelModel):
	"""Partial update: every field optional, unknown fields rejected."""

	model_config = ConfigDict(extra="forbid")
	# Fields that may be explicitly cleared with null
	nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

	@model_validator(mode="after")
	def reject_nulls(self):
		for name in self.model_fields_set:
			if getattr(self, name) is None and name not in self.nullable_fields:
				raise ValueError(f"{name} may not be null")
		return self

	def changes(self) -> Dict[str, object]:
		return self.model_dump(exclude_unset=True)

	def to_wire(self) -> dict:
		return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class StudentPatch(RecordPatch):
	name: Optional[str] = None
	email: Optional[str] = None
	level: Optional[Level] = None
	status: Optional[Status] = None


class TeacherPatch(RecordPatch):
	name: Optional[str] = None
	email: Optional[str] = None
	department: Optional[str] = None
	expertise: Optional[str] = None


class CoursePatch(RecordPatch):
	nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"teacher_id"})

	title: Optional[str] = None
	description: Optional[str] = None
	teacher_id: Optional[str] = None
	students_count: Optional[int] = Field(default=None, ge=0)


# ---- entity kinds ----

class EntityKind(str, Enum):
	STUDENTS = "students"
	TEACHERS = "teachers"
	COURSES = "courses"

	@property
	def label(self) -> str:
		return self.value[:-1]

	@property
	def record_type(self) -> Type[BaseModel]:
		return _RECORD_TYPES[self]

	@property
	def create_type(self) -> Type[BaseModel]:
		return _CREATE_TYPES[self]

	@property
	def patch_type(self) -> Type[RecordPatch]:
		return _PATCH_TYPES[self]


_RECORD_TYPES = {EntityKind.STUDENTS: Student, EntityKind.TEACHERS: Teacher, EntityKind.COURSES: Course}
_CREATE_TYPES = {EntityKind.STUDENTS: StudentCreate, EntityKind.TEACHERS: TeacherCreate, EntityKind.COURSES: CourseCreate}
_PATCH_TYPES = {EntityKind.STUDENTS: StudentPatch, EntityKind.TEACHERS: TeacherPatch, EntityKind.COURSES: CoursePatch}


def display_name(record) -> str:
	# Courses are shown by title, people by name
	return getattr(record, "title", None) or getattr(record, "name", "")


# ---- aggregate ----

class AppState(CamelModel):
	model_config = ConfigDict(frozen=True)

	students: Tuple[Student, ...] = ()
	teachers: Tuple[Teacher, ...] = ()
	courses: Tuple[Course, ...] = ()
	activities: Tuple[ActivityEntry, ...] = ()

	def records(self, kind: EntityKind) -> Tuple[Record, ...]:
		return getattr(self, kind.value)

	def find(self, kind: EntityKind, record_id: str) -> Optional[Record]:
		for record in self.records(kind):
			if record.id == record_id:
				return record
		return None

	def with_records(self, kind: EntityKind, records: Iterable[Record]) -> "AppState":
		return self.model_copy(update={kind.value: tuple(records)})

	def with_activities(self, activities: Iterable[ActivityEntry]) -> "AppState":
		return self.model_copy(update={"activities": tuple(activities)})


def resolve_teacher_name(state: AppState, teacher_id: Optional[str]) -> str:
	if not teacher_id:
		return UNASSIGNED
	teacher = state.find(EntityKind.TEACHERS, teacher_id)
	return teacher.name if teacher is not None else UNASSIGNED

from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base
from .schemas import DEFAULT_ACTIVITY_TIMESTAMP, EntityKind


def _new_id() -> str:
	# Server assigns the authoritative id
	return uuid.uuid4().hex


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class StudentRow(Base):
	__tablename__ = "students"
	id = Column(String(32), primary_key=True, default=_new_id)
	name = Column(String(256), nullable=False)
	email = Column(String(256), nullable=False)
	level = Column(String(32), nullable=False, default="Beginner")
	status = Column(String(32), nullable=False, default="Active")
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
	updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class TeacherRow(Base):
	__tablename__ = "teachers"
	id = Column(String(32), primary_key=True, default=_new_id)
	name = Column(String(256), nullable=False)
	email = Column(String(256), nullable=False)
	department = Column(String(256), nullable=False, default="")
	expertise = Column(String(512), nullable=False, default="")
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
	updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class CourseRow(Base):
	__tablename__ = "courses"
	id = Column(String(32), primary_key=True, default=_new_id)
	title = Column(String(256), nullable=False)
	description = Column(Text, nullable=False, default="")
	# Soft reference to teachers.id; no foreign key on purpose
	teacher_id = Column(String(32), nullable=True)
	students_count = Column(Integer, nullable=False, default=0)
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
	updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class ActivityRow(Base):
	__tablename__ = "activities"
	# Insertion order; newest has the highest seq
	seq = Column(Integer, primary_key=True, autoincrement=True)
	id = Column(String(32), unique=True, nullable=False, default=_new_id)
	message = Column(Text, nullable=False)
	timestamp = Column(String(64), nullable=False, default=DEFAULT_ACTIVITY_TIMESTAMP)
	created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


ROW_TYPES = {
	EntityKind.STUDENTS: StudentRow,
	EntityKind.TEACHERS: TeacherRow,
	EntityKind.COURSES: CourseRow,
}

from __future__ import annotations

from .schemas import ActivityEntry, AppState, Course, Student, Teacher

# Written to an empty local slot on first demo-mode load
DEMO_STATE = AppState(
	students=(
		Student(id="s1", name="Alice Thompson", email="alice.t@example.com", level="Intermediate", status="Active"),
		Student(id="s2", name="Marcus Chen", email="m.chen@example.com", level="Beginner", status="Active"),
	),
	teachers=(
		Teacher(
			id="t1",
			name="Dr. Robert Wilson",
			email="r.wilson@edustream.edu",
			department="Computer Science",
			expertise="Quantum Computing & AI Ethics",
		),
		Teacher(
			id="t2",
			name="Sarah Jenkins",
			email="s.jenkins@edustream.edu",
			department="Mathematics",
			expertise="Abstract Algebra & Topology",
		),
	),
	courses=(
		Course(
			id="c1",
			title="Advanced React Patterns",
			description="Deep dive into modern web development with hooks and context.",
			teacher_id="t1",
			students_count=24,
		),
		Course(
			id="c2",
			title="Calculus III",
			description="Multivariable calculus and vector analysis for engineering students.",
			teacher_id="t2",
			students_count=18,
		),
	),
	activities=(
		ActivityEntry(id="a1", message="Academic portal initialized successfully"),
	),
)

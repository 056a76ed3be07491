"""
Best-effort text generation for course descriptions and teacher bios.

Two kinds of generator sit behind one interface: an upstream one (Gemini on
the server, the API endpoint from the portal) and a deterministic template
one. ``TextAssist`` always returns text; upstream failures are logged and
answered from the templates.
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

import httpx

from .errors import AiGenerationUnavailable
from .gemini_client import GeminiClient
from .schemas import CourseCreate, CoursePatch

logger = logging.getLogger(__name__)

GENERATED = "generated"
FALLBACK = "fallback"

COURSE_TEMPLATES = (
	"An intensive program exploring the fundamental concepts of {title}, focusing on practical application and theory.",
	"Master the core principles of {title} through hands-on learning and expert-led curriculum.",
	"A comprehensive guide to {title}, designed to provide students with a competitive edge in the modern industry.",
)

BIO_TEMPLATE = "{name} is a specialist educator in {subject} with extensive professional experience."


def course_description_prompt(title: str) -> str:
	return (
		f'Generate a short, professional academic course description for "{title}". '
		"Focus on learning outcomes. Maximum 20 words."
	)


def teacher_bio_prompt(name: str, subject: str) -> str:
	return (
		f"Write a short, professional faculty bio for {name}, who teaches {subject}. "
		"Third person, maximum 30 words."
	)


class TextGenerator(Protocol):
	async def course_description(self, title: str) -> str:
		...

	async def teacher_bio(self, name: str, subject: str) -> str:
		...


class TemplateTextGenerator:
	"""Deterministic local text; the same input always gives the same output."""

	async def course_description(self, title: str) -> str:
		title = title.strip() or "the subject"
		index = zlib.crc32(title.encode("utf-8")) % len(COURSE_TEMPLATES)
		return COURSE_TEMPLATES[index].format(title=title)

	async def teacher_bio(self, name: str, subject: str) -> str:
		return BIO_TEMPLATE.format(
			name=name.strip() or "This instructor",
			subject=subject.strip() or "their field",
		)


class GeminiTextGenerator:
	def __init__(self, client: GeminiClient) -> None:
		self._client = client

	async def course_description(self, title: str) -> str:
		return await self._client.generate(course_description_prompt(title))

	async def teacher_bio(self, name: str, subject: str) -> str:
		return await self._client.generate(teacher_bio_prompt(name, subject))


class RemoteTextGenerator:
	"""Asks the API server's ``/ai`` endpoints for text."""

	def __init__(self, client: httpx.AsyncClient) -> None:
		self._client = client

	async def course_description(self, title: str) -> str:
		return await self._post("ai/generate-course-description", {"title": title})

	async def teacher_bio(self, name: str, subject: str) -> str:
		return await self._post("ai/generate-teacher-bio", {"name": name, "subject": subject})

	async def _post(self, path: str, body: dict) -> str:
		try:
			r = await self._client.post(path, json=body)
			r.raise_for_status()
			text = r.json()["text"]
		except (httpx.HTTPError, ValueError, KeyError, TypeError) as err:
			raise AiGenerationUnavailable(f"{path} failed: {err}") from err
		if not isinstance(text, str) or not text.strip():
			raise AiGenerationUnavailable(f"{path} returned no text")
		return text.strip()


@dataclass(frozen=True)
class AssistResult:
	text: str
	source: str

	@property
	def generated(self) -> bool:
		return self.source == GENERATED


class TextAssist:
	def __init__(self, primary: Optional[TextGenerator] = None, fallback: Optional[TextGenerator] = None) -> None:
		# primary=None means upstream is not configured: go straight to templates
		self._primary = primary
		self._fallback = fallback or TemplateTextGenerator()

	@property
	def upstream_available(self) -> bool:
		return self._primary is not None

	async def describe_course(self, title: str) -> AssistResult:
		return await self._run(lambda g: g.course_description(title), "course description")

	async def describe_teacher(self, name: str, subject: str) -> AssistResult:
		return await self._run(lambda g: g.teacher_bio(name, subject), "teacher bio")

	async def _run(self, call: Callable[[TextGenerator], Awaitable[str]], what: str) -> AssistResult:
		if self._primary is not None:
			try:
				return AssistResult(text=await call(self._primary), source=GENERATED)
			except AiGenerationUnavailable as exc:
				logger.warning("%s generation unavailable, using template: %s", what, exc)
		return AssistResult(text=await call(self._fallback), source=FALLBACK)


@dataclass
class CourseDraft:
	"""A course form being filled in before submission."""

	title: str = ""
	description: str = ""
	teacher_id: Optional[str] = None
	students_count: int = 0

	def to_create(self) -> CourseCreate:
		return CourseCreate(
			title=self.title,
			description=self.description,
			teacher_id=self.teacher_id or None,
			students_count=self.students_count,
		)

	def to_patch(self) -> CoursePatch:
		return CoursePatch(
			title=self.title,
			description=self.description,
			teacher_id=self.teacher_id or None,
			students_count=self.students_count,
		)


async def fill_description(assist: TextAssist, draft: CourseDraft) -> Optional[AssistResult]:
	"""Generate a description for ``draft`` and merge it in.

	Returns None without touching the draft when the title is blank, or when
	the title was edited while the request was pending (the result is stale).
	"""
	title = draft.title.strip()
	if not title:
		return None
	result = await assist.describe_course(title)
	if draft.title.strip() != title:
		logger.debug("discarding description for superseded title %r", title)
		return None
	draft.description = result.text
	return result

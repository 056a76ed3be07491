from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..assist import GeminiTextGenerator, TextAssist
from ..gemini_client import GeminiClient
from ..settings import settings

router = APIRouter(prefix="/ai", tags=["ai"])


class CourseDescriptionRequest(BaseModel):
	title: str = ""


class TeacherBioRequest(BaseModel):
	name: str = ""
	subject: str = ""


class TextResponse(BaseModel):
	text: str


async def get_assist():
	# Missing or placeholder key: templates only, no network call
	if not settings.ai_configured:
		yield TextAssist()
		return
	client = GeminiClient()
	try:
		yield TextAssist(GeminiTextGenerator(client))
	finally:
		await client.aclose()


@router.post("/generate-course-description", response_model=TextResponse)
async def generate_course_description(req: CourseDescriptionRequest, assist: TextAssist = Depends(get_assist)):
	result = await assist.describe_course(req.title)
	return TextResponse(text=result.text)


@router.post("/generate-teacher-bio", response_model=TextResponse)
async def generate_teacher_bio(req: TeacherBioRequest, assist: TextAssist = Depends(get_assist)):
	result = await assist.describe_teacher(req.name, req.subject)
	return TextResponse(text=result.text)

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..activity import ACTIVITY_LIMIT
from ..db import get_db
from ..models import ActivityRow, CourseRow, StudentRow, TeacherRow
from ..schemas import ActivityEntry, AppState, Course, Student, Teacher

router = APIRouter(tags=["data"])


@router.get("/data", response_model=AppState)
def get_data(db: Session = Depends(get_db)):
	activities = db.query(ActivityRow).order_by(ActivityRow.seq.desc()).limit(ACTIVITY_LIMIT).all()
	return AppState(
		students=[Student.model_validate(r) for r in db.query(StudentRow).order_by(StudentRow.created_at).all()],
		teachers=[Teacher.model_validate(r) for r in db.query(TeacherRow).order_by(TeacherRow.created_at).all()],
		courses=[Course.model_validate(r) for r in db.query(CourseRow).order_by(CourseRow.created_at).all()],
		activities=[ActivityEntry.model_validate(r) for r in activities],
	)

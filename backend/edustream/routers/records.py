from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..activity import created_message, removed_message, updated_message
from ..cleanup import prune_activity_log
from ..db import get_db
from ..models import ActivityRow, ROW_TYPES
from ..schemas import EntityKind


def record_activity(db: Session, message: str) -> None:
	db.add(ActivityRow(message=message))
	db.flush()
	prune_activity_log(db)


def build_router(kind: EntityKind) -> APIRouter:
	"""Create/update/delete endpoints for one entity kind.

	Every change appends one activity row in the same transaction, phrased the
	same way the portal phrases its own log entries.
	"""
	router = APIRouter(prefix=f"/{kind.value}", tags=[kind.value])
	row_type = ROW_TYPES[kind]
	record_type = kind.record_type
	create_type = kind.create_type
	patch_type = kind.patch_type
	not_found = f"{kind.label.capitalize()} not found"

	@router.get("", response_model=list[record_type])
	def list_records(db: Session = Depends(get_db)):
		rows = db.query(row_type).order_by(row_type.created_at).all()
		return [record_type.model_validate(row) for row in rows]

	@router.post("", response_model=record_type)
	def create_record(payload: create_type, db: Session = Depends(get_db)):
		row = row_type(**payload.model_dump())
		db.add(row)
		db.flush()
		record = record_type.model_validate(row)
		record_activity(db, created_message(kind, record))
		db.commit()
		return record

	@router.put("/{record_id}", response_model=record_type)
	def update_record(record_id: str, payload: patch_type, db: Session = Depends(get_db)):
		row = db.get(row_type, record_id)
		if row is None:
			raise HTTPException(status_code=404, detail=not_found)
		for key, value in payload.changes().items():
			setattr(row, key, value)
		db.flush()
		record = record_type.model_validate(row)
		record_activity(db, updated_message(kind, record))
		db.commit()
		return record

	@router.delete("/{record_id}")
	def delete_record(record_id: str, db: Session = Depends(get_db)):
		row = db.get(row_type, record_id)
		if row is None:
			raise HTTPException(status_code=404, detail=not_found)
		record = record_type.model_validate(row)
		db.delete(row)
		record_activity(db, removed_message(kind, record))
		db.commit()
		return {"success": True}

	return router


students = build_router(EntityKind.STUDENTS)
teachers = build_router(EntityKind.TEACHERS)
courses = build_router(EntityKind.COURSES)

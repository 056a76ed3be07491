from __future__ import annotations
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .activity import ACTIVITY_LIMIT
from .models import ActivityRow


def prune_activity_log(db: Session, keep: int = ACTIVITY_LIMIT) -> int:
	"""Delete all but the ``keep`` most recent activity rows. Caller commits."""
	cutoff = db.execute(
		select(ActivityRow.seq).order_by(ActivityRow.seq.desc()).offset(keep).limit(1)
	).scalar()
	if cutoff is None:
		return 0
	res = db.execute(delete(ActivityRow).where(ActivityRow.seq <= cutoff))
	return res.rowcount or 0

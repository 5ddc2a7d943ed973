from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from gymtrack.db import get_db
from gymtrack.deps.engine import require_user_id
from gymtrack.repositories.session_record_repo import SessionRecordRepository
from gymtrack.schemas.record import SessionRecordRead

router = APIRouter(prefix="/records", tags=["records"])

@router.get("", response_model=list[SessionRecordRead])
def list_my_records(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_user_id),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return SessionRecordRepository(db).list_by_user(user_id, limit=limit, offset=offset)

@router.get("/{record_id}", response_model=SessionRecordRead)
def get_record(record_id: int, db: Session = Depends(get_db), user_id: str = Depends(require_user_id)):
    rec = SessionRecordRepository(db).get(record_id)
    if not rec or rec.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return rec

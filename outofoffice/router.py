from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user

from .schema import OutOfOfficeEntrySchema, OutOfOfficeCreatePayload
from . import service

ooo_router = APIRouter(prefix="/out-of-office", tags=["Out of Office"])

# List the caller's current and upcoming redirects
@ooo_router.get("", response_model=list[OutOfOfficeEntrySchema])
def list_out_of_office(
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    return service.list_out_of_office(db, user_id=user.id)

# Create a redirect for the caller
@ooo_router.post("", status_code=status.HTTP_201_CREATED)
def create_out_of_office(
    payload: OutOfOfficeCreatePayload,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    try:
        service.create_out_of_office(db, user=user, payload=payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="out_of_office_entry_already_exists")
    return {}

# Delete one of the caller's redirects by its uuid
@ooo_router.delete("/{out_of_office_uid}")
def delete_out_of_office(
    out_of_office_uid: str,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    service.delete_out_of_office(db, user_id=user.id, out_of_office_uid=out_of_office_uid)
    return {}

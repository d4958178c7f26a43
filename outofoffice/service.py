from __future__ import annotations
import logging
from datetime import date, datetime, time, timezone
from typing import Optional, List, Tuple
from uuid import uuid4
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlalchemy import select, delete, and_, or_
from sqlalchemy.orm import Session, selectinload

from core.config_loader import settings
from notifications.email_service import send_booking_redirect_notification
from user.models import User

from .models import OutOfOfficeEntry
from .schema import OutOfOfficeCreatePayload, BookingRedirectNotification

logger = logging.getLogger(__name__)


# -------- helpers --------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _server_tz() -> ZoneInfo:
    return ZoneInfo(settings.SERVER_TIMEZONE)


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def day_bounds(start_date: date, end_date: date, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """Start of the first day and end of the last day, in `tz`."""
    start = datetime.combine(start_date, time.min, tzinfo=tz)
    end = datetime.combine(end_date, time.max, tzinfo=tz)
    return start, end


def earliest_allowed_start(now: datetime, tz: ZoneInfo, offset_at: datetime) -> datetime:
    """
    Today's start of day in `tz`, pulled back by the absolute UTC offset.

    Lets callers a few hours ahead of or behind the server still pick
    "today" as a start date.
    """
    today = now.astimezone(tz).date()
    offset = offset_at.utcoffset()
    return datetime.combine(today, time.min, tzinfo=tz) - abs(offset)


def format_redirect_dates(start: datetime, end: datetime, tz: ZoneInfo) -> str:
    """MM/DD/YYYY - MM/DD/YYYY, rendered in `tz`."""
    fmt = "%m/%d/%Y"
    return f"{start.astimezone(tz).strftime(fmt)} - {end.astimezone(tz).strftime(fmt)}"


def _lock_owner(db: Session, user_id: int) -> None:
    # Serializes concurrent creates for the same owner. SQLite ignores FOR UPDATE.
    db.execute(select(User.id).where(User.id == user_id).with_for_update())


# -------- queries --------

def get_out_of_office_for_user(db: Session, out_of_office_uid: str, user_id: int) -> OutOfOfficeEntry | None:
    stmt = select(OutOfOfficeEntry).where(
        OutOfOfficeEntry.uuid == out_of_office_uid,
        OutOfOfficeEntry.user_id == user_id,
    )
    return db.scalars(stmt).first()


def find_overlapping_entry(db: Session, *, user_id: int, start: datetime, end: datetime) -> OutOfOfficeEntry | None:
    """First entry of `user_id` whose window overlaps [start, end]."""
    stmt = select(OutOfOfficeEntry).where(
        OutOfOfficeEntry.user_id == user_id,
        or_(
            # existing window straddles the new one
            and_(OutOfOfficeEntry.start < end, OutOfOfficeEntry.end > start),
            # existing start inside the new window
            and_(OutOfOfficeEntry.start > start, OutOfOfficeEntry.start < end),
            # existing end inside the new window
            and_(OutOfOfficeEntry.end > start, OutOfOfficeEntry.end < end),
        ),
    )
    return db.scalars(stmt).first()


def find_reverse_redirect(
    db: Session, *, user_id: int, to_user_id: Optional[int], start: datetime, end: datetime
) -> OutOfOfficeEntry | None:
    """
    An entry redirecting to `user_id` during [start, end].

    With a delegate, only entries owned by that delegate count. Without one,
    any incoming redirect counts, since bookings would land on an absent user.
    """
    stmt = select(OutOfOfficeEntry).where(
        OutOfOfficeEntry.to_user_id == user_id,
        or_(
            and_(OutOfOfficeEntry.start <= end, OutOfOfficeEntry.end >= start),
            and_(OutOfOfficeEntry.start >= start, OutOfOfficeEntry.end <= end),
        ),
    )
    if to_user_id is not None:
        stmt = stmt.where(OutOfOfficeEntry.user_id == to_user_id)
    return db.scalars(stmt).first()


def list_out_of_office(db: Session, *, user_id: int) -> List[OutOfOfficeEntry]:
    """Current and upcoming entries for a user, latest start first."""
    stmt = (
        select(OutOfOfficeEntry)
        .options(selectinload(OutOfOfficeEntry.to_user))
        .where(
            OutOfOfficeEntry.user_id == user_id,
            OutOfOfficeEntry.end >= _utcnow(),
        )
        .order_by(OutOfOfficeEntry.start.desc())
    )
    return list(db.scalars(stmt))


# -------- mutations --------

def create_out_of_office(db: Session, *, user: User, payload: OutOfOfficeCreatePayload) -> OutOfOfficeEntry:
    if not payload.start_date or not payload.end_date:
        raise HTTPException(status_code=400, detail="start_date_and_end_date_required")

    tz = _server_tz()
    start, end = day_bounds(payload.start_date, payload.end_date, tz)

    if start > end:
        raise HTTPException(status_code=400, detail="start_date_must_be_before_end_date")

    if start < earliest_allowed_start(_utcnow(), tz, start):
        raise HTTPException(status_code=400, detail="start_date_must_be_in_the_future")

    to_user_id = None
    if payload.to_team_user_id:
        to_user_id = db.scalar(select(User.id).where(User.id == payload.to_team_user_id))
        if to_user_id is None:
            raise HTTPException(status_code=404, detail="user_not_found")

    try:
        start_utc = start.astimezone(timezone.utc)
        end_utc = end.astimezone(timezone.utc)
    except OverflowError:
        # day bounds near date.min / date.max cannot be shifted to UTC
        raise HTTPException(status_code=400, detail="date_out_of_range")

    _lock_owner(db, user.id)

    if find_overlapping_entry(db, user_id=user.id, start=start_utc, end=end_utc):
        logger.info("Rejected overlapping out-of-office entry for user %s", user.id)
        raise HTTPException(status_code=409, detail="out_of_office_entry_already_exists")

    if find_reverse_redirect(
        db, user_id=user.id, to_user_id=to_user_id, start=start_utc, end=end_utc
    ):
        logger.info("Rejected redirect loop between users %s and %s", user.id, to_user_id)
        raise HTTPException(status_code=400, detail="booking_redirect_infinite_not_allowed")

    now = _utcnow()
    row = OutOfOfficeEntry(
        uuid=str(uuid4()),
        start=start_utc,
        end=end_utc,
        user_id=user.id,
        to_user_id=to_user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created out-of-office entry %s for user %s", row.uuid, user.id)

    if to_user_id is not None:
        notify_delegate(db, user=user, to_user_id=to_user_id, start=start, end=end)

    return row


def notify_delegate(db: Session, *, user: User, to_user_id: int, start: datetime, end: datetime) -> bool:
    """
    Email the delegate about a new redirect.

    The entry is already committed, so delivery problems are logged and
    never raised.
    """
    to_email = db.scalar(select(User.email).where(User.id == to_user_id))
    if not to_email:
        return False

    notification = BookingRedirectNotification(
        language=user.locale or "en",
        from_email=user.email,
        to_email=to_email,
        to_name=user.username or "",
        dates=format_redirect_dates(start, end, _server_tz()),
    )
    try:
        send_booking_redirect_notification(notification)
    except Exception:
        logger.exception("Failed to send booking redirect notification to user %s", to_user_id)
        return False
    return True


def delete_out_of_office(db: Session, *, user_id: int, out_of_office_uid: Optional[str]) -> None:
    if not out_of_office_uid:
        raise HTTPException(status_code=400, detail="out_of_office_id_required")

    row = get_out_of_office_for_user(db, out_of_office_uid, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="booking_redirect_not_found")

    # owner-scoped so a row that changed hands since the lookup is left alone
    result = db.execute(
        delete(OutOfOfficeEntry).where(
            OutOfOfficeEntry.uuid == out_of_office_uid,
            OutOfOfficeEntry.user_id == user_id,
        )
    )
    if result.rowcount == 0:
        db.rollback()
        raise HTTPException(status_code=404, detail="booking_redirect_not_found")
    db.commit()
    logger.info("Deleted out-of-office entry %s for user %s", out_of_office_uid, user_id)

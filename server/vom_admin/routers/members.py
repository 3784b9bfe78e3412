from __future__ import annotations

import csv
import io
import logging
from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from vom_admin.auth.deps import require_access
from vom_admin.auth.roles import DEFAULT_ROLE, Action, Resource
from vom_admin.core.db import get_db
from vom_admin.models.member import MEMBER_STATUSES, Member
from vom_admin.schemas.member import MemberCreate, MemberListResponse, MemberOut, MemberUpdate
from vom_admin.services.sessions import SessionUser
from vom_admin.services.user_accounts import LIKE_ESCAPE, contains_pattern, generate_uid, normalize_email, now_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])

EXPORT_HEADERS = ["Serial", "First Name", "Last Name", "Email", "Phone", "Status", "Role", "Member Since"]


def _get_member_or_404(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if not member:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return member


def _ensure_email_available(db: Session, email: str, *, exclude_id: int | None = None) -> None:
    query = db.query(Member.id).filter(func.lower(Member.email) == email)
    if exclude_id is not None:
        query = query.filter(Member.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A member with that email already exists")


def _filtered_query(db: Session, q: str | None, status_filter: str | None):
    query = db.query(Member)
    if q:
        pattern = contains_pattern(q)
        query = query.filter(
            or_(
                func.lower(Member.first_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(Member.last_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(Member.email).like(pattern, escape=LIKE_ESCAPE),
            )
        )
    if status_filter:
        query = query.filter(Member.status == status_filter)
    return query


@router.get("", response_model=MemberListResponse)
def list_members(
    *,
    q: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: SessionUser = Depends(require_access(Resource.MEMBERS, Action.VIEW)),
) -> MemberListResponse:
    query = _filtered_query(db, q, status_filter)
    total = query.order_by(None).count()
    items = (
        query.order_by(Member.last_name.asc(), Member.first_name.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return MemberListResponse(
        items=[MemberOut.model_validate(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
    )


def _format_member_row(serial: int, member: Member) -> list[str]:
    return [
        str(serial),
        member.first_name or "",
        member.last_name or "",
        member.email or "",
        member.phone or "",
        member.status or "",
        member.role or "",
        member.created_at.date().isoformat() if member.created_at else "",
    ]


def _stream_csv(rows: Iterable[list[str]]):
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    yield buffer.getvalue()
    buffer.seek(0)
    buffer.truncate(0)
    for row in rows:
        writer.writerow(row)
        yield buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)


@router.get("/export.csv", status_code=status.HTTP_200_OK)
def export_members(
    q: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_access(Resource.MEMBERS, Action.EXPORT)),
) -> StreamingResponse:
    members = _filtered_query(db, q, status_filter).order_by(Member.last_name.asc(), Member.first_name.asc()).all()
    logger.info("members_exported", extra={"uid": user.uid, "count": len(members)})
    rows = (_format_member_row(index, member) for index, member in enumerate(members, start=1))
    response = StreamingResponse(_stream_csv(rows), media_type="text/csv")
    response.headers["Content-Disposition"] = "attachment; filename=members_export.csv"
    return response


@router.get("/{member_id}", response_model=MemberOut)
def get_member(
    member_id: int,
    db: Session = Depends(get_db),
    _: SessionUser = Depends(require_access(Resource.MEMBERS, Action.VIEW)),
) -> MemberOut:
    return MemberOut.model_validate(_get_member_or_404(db, member_id))


@router.post("", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def create_member(
    payload: MemberCreate,
    db: Session = Depends(get_db),
    _: SessionUser = Depends(require_access(Resource.MEMBERS, Action.CREATE)),
) -> MemberOut:
    email = normalize_email(payload.email)
    _ensure_email_available(db, email)
    member = Member(
        uid=generate_uid(),
        email=email,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone.strip() if payload.phone else None,
        role=DEFAULT_ROLE.value,
        status="active",
        created_at=now_utc(),
        updated_at=now_utc(),
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return MemberOut.model_validate(member)


@router.patch("/{member_id}", response_model=MemberOut)
def update_member(
    member_id: int,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    _: SessionUser = Depends(require_access(Resource.MEMBERS, Action.EDIT)),
) -> MemberOut:
    member = _get_member_or_404(db, member_id)
    if payload.status is not None and payload.status not in MEMBER_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid member status")
    if payload.email is not None:
        email = normalize_email(payload.email)
        _ensure_email_available(db, email, exclude_id=member.id)
        member.email = email
    if payload.first_name is not None:
        member.first_name = payload.first_name.strip()
    if payload.last_name is not None:
        member.last_name = payload.last_name.strip()
    if payload.phone is not None:
        member.phone = payload.phone.strip() or None
    if payload.status is not None:
        member.status = payload.status
    member.updated_at = now_utc()
    db.commit()
    db.refresh(member)
    return MemberOut.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_member(
    member_id: int,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_access(Resource.MEMBERS, Action.DELETE)),
) -> Response:
    member = _get_member_or_404(db, member_id)
    if member.uid == user.uid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    member.status = "inactive"
    member.updated_at = now_utc()
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

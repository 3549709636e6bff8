from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from portal.auth.dependencies import get_auth_service, get_portal_session, get_store, require_admin
from portal.auth.service import AuthService
from portal.auth.session import PortalSession
from portal.core.exceptions import PortalError
from portal.models.user import AdminUser, dump_user
from portal.routes.auth_routes import SessionResponse, session_response
from portal.routes.errors import http_error
from portal.services.announcements import AnnouncementBoard
from portal.services.complaints import ComplaintDesk
from portal.services.students import StudentDirectory
from portal.store import RecordStore
from portal.views import AdminView

router = APIRouter(tags=['admin'])


class CreateAnnouncementRequest(BaseModel):
    title: str = ''
    content: str = ''


@router.get('/dashboard')
def dashboard(
    complaint_status: Literal['all', 'pending', 'resolved'] = Query('all', alias='status'),
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    return AdminView(store, admin, complaint_filter=complaint_status).refresh().render()


@router.get('/students')
def list_students(
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        students = StudentDirectory(store, session).list_students()
    except PortalError as exc:
        raise http_error(exc) from exc
    return [dump_user(student) for student in students]


@router.get('/students/search')
def search_student(
    query: str = Query(..., min_length=1),
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        student = StudentDirectory(store, session).search(query)
    except PortalError as exc:
        raise http_error(exc) from exc
    return dump_user(student)


@router.delete('/students/{student_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: str,
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
) -> None:
    try:
        StudentDirectory(store, session).delete(student_id)
    except PortalError as exc:
        raise http_error(exc) from exc


@router.post('/students/{student_id}/impersonate', response_model=SessionResponse)
def impersonate_student(
    student_id: str,
    admin: AdminUser = Depends(require_admin),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        student = auth.impersonate(student_id)
    except PortalError as exc:
        raise http_error(exc) from exc
    return session_response(student)


@router.get('/complaints')
def list_complaints(
    complaint_status: Literal['all', 'pending', 'resolved'] = Query('all', alias='status'),
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        complaints, counts = ComplaintDesk(store, session).list_complaints(complaint_status)
    except PortalError as exc:
        raise http_error(exc) from exc
    return {
        'complaints': [complaint.model_dump(by_alias=True) for complaint in complaints],
        'counts': counts,
    }


@router.post('/complaints/{complaint_id}/toggle')
def toggle_complaint(
    complaint_id: str,
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        complaint = ComplaintDesk(store, session).toggle_status(complaint_id)
    except PortalError as exc:
        raise http_error(exc) from exc
    return complaint.model_dump(by_alias=True)


@router.delete('/complaints/{complaint_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(
    complaint_id: str,
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
) -> None:
    try:
        ComplaintDesk(store, session).delete(complaint_id)
    except PortalError as exc:
        raise http_error(exc) from exc


@router.get('/announcements')
def list_announcements(
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        announcements = AnnouncementBoard(store, session).list_announcements()
    except PortalError as exc:
        raise http_error(exc) from exc
    return [announcement.model_dump(by_alias=True) for announcement in announcements]


@router.post('/announcements', status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: CreateAnnouncementRequest,
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        announcement = AnnouncementBoard(store, session).create(payload.title, payload.content)
    except PortalError as exc:
        raise http_error(exc) from exc
    return announcement.model_dump(by_alias=True)


@router.delete('/announcements/{announcement_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_announcement(
    announcement_id: str,
    admin: AdminUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
) -> None:
    try:
        AnnouncementBoard(store, session).delete(announcement_id)
    except PortalError as exc:
        raise http_error(exc) from exc

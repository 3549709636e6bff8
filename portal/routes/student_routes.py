from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from portal.auth.dependencies import get_chat, get_portal_session, get_store, require_student
from portal.auth.session import PortalSession
from portal.chat import ChatPlaceholder
from portal.core.exceptions import PortalError
from portal.models.complaint import COMPLAINT_TYPES
from portal.models.user import StudentUser, dump_user
from portal.routes.errors import http_error
from portal.services.announcements import AnnouncementBoard
from portal.services.complaints import ComplaintDesk
from portal.store import RecordStore
from portal.views import StudentView

router = APIRouter(tags=['student'])


class SubmitComplaintRequest(BaseModel):
    type: str = ''
    message: str = ''


class ChatMessageRequest(BaseModel):
    message: str = ''


@router.get('/profile')
def profile(student: StudentUser = Depends(require_student)):
    return dump_user(student)


@router.get('/dashboard')
def dashboard(
    student: StudentUser = Depends(require_student),
    store: RecordStore = Depends(get_store),
):
    return StudentView(store, student).refresh().render()


@router.get('/complaint-types')
def complaint_types():
    return list(COMPLAINT_TYPES)


@router.get('/complaints')
def my_complaints(
    student: StudentUser = Depends(require_student),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        complaints = ComplaintDesk(store, session).mine()
    except PortalError as exc:
        raise http_error(exc) from exc
    return [complaint.model_dump(by_alias=True) for complaint in complaints]


@router.post('/complaints', status_code=status.HTTP_201_CREATED)
def submit_complaint(
    payload: SubmitComplaintRequest,
    student: StudentUser = Depends(require_student),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        complaint = ComplaintDesk(store, session).submit(payload.type, payload.message)
    except PortalError as exc:
        raise http_error(exc) from exc
    return complaint.model_dump(by_alias=True)


@router.get('/announcements')
def announcements(
    student: StudentUser = Depends(require_student),
    store: RecordStore = Depends(get_store),
    session: PortalSession = Depends(get_portal_session),
):
    try:
        items = AnnouncementBoard(store, session).list_announcements()
    except PortalError as exc:
        raise http_error(exc) from exc
    return [announcement.model_dump(by_alias=True) for announcement in items]


@router.get('/chat')
def chat_status(
    student: StudentUser = Depends(require_student),
    chat: ChatPlaceholder = Depends(get_chat),
):
    return {'status': chat.status}


@router.post('/chat')
def send_chat_message(
    payload: ChatMessageRequest,
    student: StudentUser = Depends(require_student),
    chat: ChatPlaceholder = Depends(get_chat),
):
    return {'status': chat.send(payload.message)}

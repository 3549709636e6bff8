from fastapi import APIRouter, Depends

from portal.auth.dependencies import get_portal_session, get_store
from portal.auth.session import PortalSession
from portal.models.user import AdminUser, SessionUser, StudentUser
from portal.store import COLLECTIONS, RecordStore

router = APIRouter(tags=['entry'])

LOGIN_VIEW = 'login'
ADMIN_VIEW = 'admin'
STUDENT_VIEW = 'student'


def resolve_view(user: SessionUser | None) -> str:
    if isinstance(user, AdminUser):
        return ADMIN_VIEW
    if isinstance(user, StudentUser):
        return STUDENT_VIEW
    return LOGIN_VIEW


@router.get('/view')
def current_view(session: PortalSession = Depends(get_portal_session)):
    return {'view': resolve_view(session.user)}


@router.get('/changes')
def collection_revisions(store: RecordStore = Depends(get_store)):
    """Last-write time per collection, for clients that poll."""
    revisions = {}
    for collection in COLLECTIONS:
        revision = store.revision(collection)
        revisions[collection] = revision.isoformat() if revision else None
    return revisions

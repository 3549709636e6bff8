from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.auth import jwt_handler
from portal.auth.service import AuthService
from portal.auth.session import PortalSession
from portal.chat import ChatPlaceholder
from portal.models.user import AdminUser, SessionUser, StudentUser
from portal.store import RecordStore

security = HTTPBearer()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_portal_session(request: Request) -> PortalSession:
    return request.app.state.portal_session


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_chat(request: Request) -> ChatPlaceholder:
    return request.app.state.chat


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: PortalSession = Depends(get_portal_session),
) -> SessionUser:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    user = session.user
    if user is None or user.id != subject:
        raise HTTPException(status_code=401, detail="Session has ended")
    return user


def require_admin(user: SessionUser = Depends(get_current_user)) -> AdminUser:
    if not isinstance(user, AdminUser):
        raise HTTPException(status_code=403, detail="Only the administrator can do this.")
    return user


def require_student(user: SessionUser = Depends(get_current_user)) -> StudentUser:
    if not isinstance(user, StudentUser):
        raise HTTPException(status_code=403, detail="Only students can do this.")
    return user

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from portal.auth import jwt_handler
from portal.auth.dependencies import get_auth_service, get_current_user
from portal.auth.service import AuthService
from portal.core.exceptions import PortalError
from portal.models.user import SessionUser, StudentRegistration, dump_user
from portal.routes.errors import http_error

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: dict


def session_response(user: SessionUser) -> SessionResponse:
    token = jwt_handler.create_access_token(subject=user.id, role=user.role)
    return SessionResponse(access_token=token, user=dump_user(user))


@router.post('/login', response_model=SessionResponse)
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        user = auth.login(payload.email, payload.password)
    except PortalError as exc:
        logger.info('Login failed.')
        raise http_error(exc) from exc
    return session_response(user)


@router.post('/register', response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(payload: StudentRegistration, auth: AuthService = Depends(get_auth_service)):
    try:
        user = auth.register(payload)
    except PortalError as exc:
        raise http_error(exc) from exc
    return session_response(user)


@router.post('/logout')
def logout(auth: AuthService = Depends(get_auth_service)):
    auth.logout()
    return {'message': 'Logged out'}


@router.get('/me')
def me(current_user: SessionUser = Depends(get_current_user)):
    return dump_user(current_user)

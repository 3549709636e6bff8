import logging
from typing import Callable

from pydantic import ValidationError

from portal.core.exceptions import PermissionDenied
from portal.models.user import AdminUser, SessionUser, StudentUser, dump_user, session_user_adapter
from portal.store import RecordStore

logger = logging.getLogger(__name__)


class PortalSession:
    """The currently authenticated user, mirrored into the record store.

    One instance lives on the application and is handed to whatever needs
    it. ``hydrate()`` loads the stored value at startup; ``end()`` clears both
    the in-memory user and the stored copy.
    """

    def __init__(self, store: RecordStore):
        self._store = store
        self._user: SessionUser | None = None
        self._listeners: list[Callable[[SessionUser | None], None]] = []

    def hydrate(self) -> SessionUser | None:
        raw = self._store.read_session()
        if raw is None:
            self._user = None
            return None

        try:
            self._user = session_user_adapter.validate_python(raw)
        except ValidationError:
            logger.warning('Stored session does not look like a user. Starting logged out.')
            self._user = None
        return self._user

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def is_admin(self) -> bool:
        return isinstance(self._user, AdminUser)

    @property
    def is_student(self) -> bool:
        return isinstance(self._user, StudentUser)

    def require_admin(self) -> AdminUser:
        if not isinstance(self._user, AdminUser):
            raise PermissionDenied('Only the administrator can do this.')
        return self._user

    def require_student(self) -> StudentUser:
        if not isinstance(self._user, StudentUser):
            raise PermissionDenied('Only students can do this.')
        return self._user

    def on_change(self, callback: Callable[[SessionUser | None], None]) -> None:
        """Call ``callback`` with the new user after every start and end."""
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback(self._user)

    def start(self, user: SessionUser) -> SessionUser:
        self._store.write_session(dump_user(user))
        self._user = user
        self._changed()
        return user

    def end(self) -> None:
        self._store.clear_session()
        self._user = None
        self._changed()

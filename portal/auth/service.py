import logging

from pydantic import ValidationError as ModelValidationError

from portal.auth.passwords import hash_password, verify_password
from portal.auth.session import PortalSession
from portal.core import config
from portal.core.exceptions import DuplicateIdentity, InvalidCredentials, NotFound, PermissionDenied, ValidationError
from portal.core.identifiers import new_record_id
from portal.models.user import AdminUser, SessionUser, StudentRecord, StudentRegistration, StudentUser, dump_user
from portal.store import STUDENTS, RecordStore

logger = logging.getLogger(__name__)

REQUIRED_REGISTRATION_FIELDS = ('name', 'email', 'password', 'reg_no', 'department', 'level')


class AuthService:
    """Login, registration, logout and impersonation over one ``PortalSession``."""

    def __init__(
        self,
        store: RecordStore,
        session: PortalSession,
        admin_email: str | None = None,
        admin_password: str | None = None,
    ):
        self._store = store
        self._session = session
        self._admin_email = config.ADMIN_EMAIL if admin_email is None else admin_email
        self._admin_password = config.ADMIN_PASSWORD if admin_password is None else admin_password

    @property
    def session(self) -> PortalSession:
        return self._session

    def current_session(self) -> SessionUser | None:
        return self._session.user

    def _admin_user(self) -> AdminUser:
        return AdminUser(id=config.ADMIN_ID, name=config.ADMIN_NAME, email=self._admin_email)

    def login(self, email: str, password: str) -> SessionUser:
        if email == self._admin_email and password == self._admin_password:
            logger.info('Administrator logged in.')
            return self._session.start(self._admin_user())

        for raw in self._store.read(STUDENTS):
            stored_password = raw.get('password')
            if raw.get('email') != email or not isinstance(stored_password, str):
                continue
            if not verify_password(password, stored_password):
                continue
            try:
                student = StudentRecord.model_validate(raw)
            except ModelValidationError:
                logger.warning('Skipping malformed student record %r during login.', raw.get('id'))
                continue
            logger.info('Student %s logged in.', student.id)
            return self._session.start(student.public_profile())

        raise InvalidCredentials()

    def register(self, candidate: StudentRegistration) -> StudentUser:
        for field in REQUIRED_REGISTRATION_FIELDS:
            if not getattr(candidate, field).strip():
                raise ValidationError('Please fill in all fields', field=field)

        students = self._store.read(STUDENTS)
        if any(
            raw.get('email') == candidate.email or raw.get('regNo') == candidate.reg_no
            for raw in students
        ):
            raise DuplicateIdentity()

        record = StudentRecord(
            id=new_record_id('student', (raw.get('id') for raw in students)),
            name=candidate.name,
            email=candidate.email,
            reg_no=candidate.reg_no,
            department=candidate.department,
            level=candidate.level,
            password=hash_password(candidate.password),
        )
        students.append(dump_user(record))
        self._store.write(STUDENTS, students)
        logger.info('Registered student %s.', record.id)

        return self._session.start(record.public_profile())

    def logout(self) -> None:
        self._session.end()

    def impersonate(self, student_id: str) -> StudentUser:
        """Switch an admin session to a student's profile without their password."""
        if not self._session.is_admin:
            raise PermissionDenied('Only the administrator can log in as a student.')

        for raw in self._store.read(STUDENTS):
            if raw.get('id') != student_id:
                continue
            try:
                profile = StudentRecord.model_validate(raw).public_profile()
            except ModelValidationError as exc:
                raise NotFound('Student', student_id) from exc
            logger.info('Administrator is now acting as student %s.', student_id)
            return self._session.start(profile)

        raise NotFound('Student', student_id)

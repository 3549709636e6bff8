import logging

from pydantic import ValidationError as ModelValidationError

from portal.auth.session import PortalSession
from portal.core.exceptions import NotFound
from portal.models.user import StudentRecord, StudentUser
from portal.store import STUDENTS, RecordStore

logger = logging.getLogger(__name__)


def load_students(store: RecordStore) -> list[StudentRecord]:
    students = []
    for raw in store.read(STUDENTS):
        try:
            students.append(StudentRecord.model_validate(raw))
        except ModelValidationError:
            logger.warning('Ignoring malformed student record %r.', raw.get('id'))
    return students


class StudentDirectory:
    """Admin-side management of registered students."""

    def __init__(self, store: RecordStore, session: PortalSession):
        self._store = store
        self._session = session

    def list_students(self) -> list[StudentUser]:
        self._session.require_admin()
        return [student.public_profile() for student in load_students(self._store)]

    def search(self, query: str) -> StudentUser:
        """Find a student by id or registration number."""
        self._session.require_admin()
        query = query.strip()
        for student in load_students(self._store):
            if student.id == query or student.reg_no == query:
                return student.public_profile()
        raise NotFound('Student', query)

    def delete(self, student_id: str) -> None:
        # Complaints keep their studentId; orphaned references are expected.
        self._session.require_admin()
        students = self._store.read(STUDENTS)
        remaining = [raw for raw in students if raw.get('id') != student_id]
        if len(remaining) == len(students):
            raise NotFound('Student', student_id)
        self._store.write(STUDENTS, remaining)
        logger.info('Deleted student %s.', student_id)

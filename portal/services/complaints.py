import logging
from typing import Literal

from pydantic import ValidationError as ModelValidationError

from portal.auth.session import PortalSession
from portal.core.exceptions import NotFound, ValidationError
from portal.core.identifiers import new_record_id, utc_timestamp
from portal.models.complaint import COMPLAINT_TYPES, PENDING, RESOLVED, Complaint
from portal.store import COMPLAINTS, RecordStore

logger = logging.getLogger(__name__)

StatusFilter = Literal['all', 'pending', 'resolved']


def load_complaints(store: RecordStore) -> list[Complaint]:
    complaints = []
    for raw in store.read(COMPLAINTS):
        try:
            complaints.append(Complaint.model_validate(raw))
        except ModelValidationError:
            logger.warning('Ignoring malformed complaint record %r.', raw.get('id'))
    return complaints


def count_by_status(complaints: list[Complaint]) -> dict[str, int]:
    return {
        'all': len(complaints),
        PENDING: sum(1 for complaint in complaints if complaint.status == PENDING),
        RESOLVED: sum(1 for complaint in complaints if complaint.status == RESOLVED),
    }


class ComplaintDesk:
    def __init__(self, store: RecordStore, session: PortalSession):
        self._store = store
        self._session = session

    def submit(self, complaint_type: str, message: str) -> Complaint:
        """File a complaint as the current student. Newest complaints come first."""
        student = self._session.require_student()

        if not complaint_type:
            raise ValidationError('Please select a complaint type', field='type')
        if complaint_type not in COMPLAINT_TYPES:
            raise ValidationError(f'Unknown complaint type: {complaint_type}', field='type')
        if not message.strip():
            raise ValidationError('Please provide a message', field='message')

        existing = self._store.read(COMPLAINTS)
        complaint = Complaint(
            id=new_record_id('comp', (raw.get('id') for raw in existing)),
            student_id=student.id,
            student_name=student.name,
            type=complaint_type,
            message=message,
            status=PENDING,
            created_at=utc_timestamp(),
        )
        self._store.write(COMPLAINTS, [complaint.model_dump(by_alias=True), *existing])
        logger.info('Student %s submitted complaint %s.', student.id, complaint.id)
        return complaint

    def mine(self) -> list[Complaint]:
        student = self._session.require_student()
        return [c for c in load_complaints(self._store) if c.student_id == student.id]

    def list_complaints(self, status: StatusFilter = 'all') -> tuple[list[Complaint], dict[str, int]]:
        """Complaints matching ``status``, plus counts over all complaints."""
        self._session.require_admin()
        complaints = load_complaints(self._store)
        if status == 'all':
            selected = complaints
        else:
            selected = [complaint for complaint in complaints if complaint.status == status]
        return selected, count_by_status(complaints)

    def toggle_status(self, complaint_id: str) -> Complaint:
        self._session.require_admin()
        records = self._store.read(COMPLAINTS)

        for index, raw in enumerate(records):
            if raw.get('id') != complaint_id:
                continue
            try:
                updated = Complaint.model_validate(raw).toggled()
            except ModelValidationError as exc:
                raise NotFound('Complaint', complaint_id) from exc
            records[index] = updated.model_dump(by_alias=True)
            self._store.write(COMPLAINTS, records)
            logger.info('Complaint %s is now %s.', complaint_id, updated.status)
            return updated

        raise NotFound('Complaint', complaint_id)

    def delete(self, complaint_id: str) -> None:
        self._session.require_admin()
        records = self._store.read(COMPLAINTS)
        remaining = [raw for raw in records if raw.get('id') != complaint_id]
        if len(remaining) == len(records):
            raise NotFound('Complaint', complaint_id)
        self._store.write(COMPLAINTS, remaining)
        logger.info('Deleted complaint %s.', complaint_id)

import logging

from pydantic import ValidationError as ModelValidationError

from portal.auth.session import PortalSession
from portal.core.exceptions import NotFound, PermissionDenied, ValidationError
from portal.core.identifiers import new_record_id, utc_timestamp
from portal.models.announcement import Announcement
from portal.store import ANNOUNCEMENTS, RecordStore

logger = logging.getLogger(__name__)


def load_announcements(store: RecordStore) -> list[Announcement]:
    announcements = []
    for raw in store.read(ANNOUNCEMENTS):
        try:
            announcements.append(Announcement.model_validate(raw))
        except ModelValidationError:
            logger.warning('Ignoring malformed announcement record %r.', raw.get('id'))
    return announcements


class AnnouncementBoard:
    def __init__(self, store: RecordStore, session: PortalSession):
        self._store = store
        self._session = session

    def list_announcements(self) -> list[Announcement]:
        if self._session.user is None:
            raise PermissionDenied('Log in to read announcements.')
        return load_announcements(self._store)

    def create(self, title: str, content: str) -> Announcement:
        self._session.require_admin()

        if not title.strip():
            raise ValidationError('Please fill in both title and content', field='title')
        if not content.strip():
            raise ValidationError('Please fill in both title and content', field='content')

        existing = self._store.read(ANNOUNCEMENTS)
        announcement = Announcement(
            id=new_record_id('ann', (raw.get('id') for raw in existing)),
            title=title,
            content=content,
            created_at=utc_timestamp(),
        )
        self._store.write(ANNOUNCEMENTS, [announcement.model_dump(by_alias=True), *existing])
        logger.info('Posted announcement %s.', announcement.id)
        return announcement

    def delete(self, announcement_id: str) -> None:
        self._session.require_admin()
        records = self._store.read(ANNOUNCEMENTS)
        remaining = [raw for raw in records if raw.get('id') != announcement_id]
        if len(remaining) == len(records):
            raise NotFound('Announcement', announcement_id)
        self._store.write(ANNOUNCEMENTS, remaining)
        logger.info('Deleted announcement %s.', announcement_id)

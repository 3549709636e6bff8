"""Dashboard views.

A view holds a copy of the collections it shows for one viewer. It reloads
that copy when asked, when a subscribed collection is written through the
same store, and, once polling is started, every ``POLL_INTERVAL_SECONDS`` so
that writes from other processes show up too.
"""

import logging
import threading

from portal.auth.session import PortalSession
from portal.core import config
from portal.models.user import AdminUser, StudentUser, dump_user
from portal.services.announcements import load_announcements
from portal.services.complaints import StatusFilter, count_by_status, load_complaints
from portal.services.students import load_students
from portal.store import ANNOUNCEMENTS, COMPLAINTS, STUDENTS, RecordStore

logger = logging.getLogger(__name__)


class DashboardView:
    collections: tuple[str, ...] = ()

    def __init__(self, store: RecordStore, poll_interval: float | None = None):
        self._store = store
        self._poll_interval = config.POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        self._lock = threading.Lock()
        self._unsubscribers = []
        self._stop_polling = threading.Event()
        self._poller: threading.Thread | None = None

    def _load(self) -> None:
        raise NotImplementedError

    def refresh(self) -> "DashboardView":
        with self._lock:
            self._load()
        return self

    def render(self) -> dict:
        raise NotImplementedError

    def watch(self) -> "DashboardView":
        for collection in self.collections:
            self._unsubscribers.append(self._store.subscribe(collection, self._on_write))
        return self

    def _on_write(self, _records: list[dict]) -> None:
        self.refresh()

    def start_polling(self) -> None:
        if self._poller is not None:
            return
        self._stop_polling.clear()
        self._poller = threading.Thread(
            target=self._poll_loop,
            name=f'{type(self).__name__}-poller',
            daemon=True,
        )
        self._poller.start()
        logger.debug('%s polling every %.2fs.', type(self).__name__, self._poll_interval)

    def _poll_loop(self) -> None:
        while not self._stop_polling.wait(self._poll_interval):
            self.refresh()

    def stop_polling(self) -> None:
        self._stop_polling.set()
        if self._poller is not None:
            self._poller.join(timeout=self._poll_interval + 1)
            self._poller = None

    def close(self) -> None:
        self.stop_polling()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class StudentView(DashboardView):
    """Profile, own complaints and announcements for one student."""

    collections = (COMPLAINTS, ANNOUNCEMENTS)

    def __init__(self, store: RecordStore, student: StudentUser, poll_interval: float | None = None):
        super().__init__(store, poll_interval)
        self.profile = student
        self.complaints = []
        self.announcements = []

    @classmethod
    def for_session(cls, store: RecordStore, session: PortalSession, **kwargs) -> "StudentView":
        return cls(store, session.require_student(), **kwargs)

    def _load(self) -> None:
        self.complaints = [c for c in load_complaints(self._store) if c.student_id == self.profile.id]
        self.announcements = load_announcements(self._store)

    def render(self) -> dict:
        return {
            'profile': dump_user(self.profile),
            'complaints': [c.model_dump(by_alias=True) for c in self.complaints],
            'announcements': [a.model_dump(by_alias=True) for a in self.announcements],
        }


class AdminView(DashboardView):
    collections = (STUDENTS, COMPLAINTS, ANNOUNCEMENTS)

    def __init__(
        self,
        store: RecordStore,
        admin: AdminUser,
        complaint_filter: StatusFilter = 'all',
        poll_interval: float | None = None,
    ):
        super().__init__(store, poll_interval)
        self.admin = admin
        self.complaint_filter = complaint_filter
        self.students = []
        self.complaints = []
        self.complaint_counts = {}
        self.announcements = []

    @classmethod
    def for_session(cls, store: RecordStore, session: PortalSession, **kwargs) -> "AdminView":
        return cls(store, session.require_admin(), **kwargs)

    def _load(self) -> None:
        self.students = [student.public_profile() for student in load_students(self._store)]
        complaints = load_complaints(self._store)
        self.complaint_counts = count_by_status(complaints)
        if self.complaint_filter == 'all':
            self.complaints = complaints
        else:
            self.complaints = [c for c in complaints if c.status == self.complaint_filter]
        self.announcements = load_announcements(self._store)

    def render(self) -> dict:
        return {
            'students': [dump_user(student) for student in self.students],
            'complaints': [c.model_dump(by_alias=True) for c in self.complaints],
            'complaintCounts': self.complaint_counts,
            'complaintFilter': self.complaint_filter,
            'announcements': [a.model_dump(by_alias=True) for a in self.announcements],
        }

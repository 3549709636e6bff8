import time

from sqlalchemy.orm import sessionmaker

from portal.auth.service import AuthService
from portal.auth.session import PortalSession
from portal.database import Base, build_engine
from portal.models.record import StoredRecord
from portal.services.announcements import AnnouncementBoard
from portal.services.complaints import ComplaintDesk
from portal.store import RecordStore
from portal.views import StudentView


def test_student_complaint_reaches_admin_and_gets_resolved(store, auth, portal_session, make_registration) -> None:
    student = auth.register(make_registration(name='Student A', email='a@x', regNo='R1'))
    desk = ComplaintDesk(store, portal_session)
    desk.submit('Academic Issues', 'desks broken')

    auth.logout()
    auth.login('admin@hafedpoly.edu.ng', 'admin123')
    complaints, _ = desk.list_complaints()

    assert len(complaints) == 1
    assert complaints[0].status == 'pending'
    assert complaints[0].student_name == 'Student A'
    assert complaints[0].student_id == student.id

    desk.toggle_status(complaints[0].id)

    complaints, _ = desk.list_complaints()
    assert complaints[0].status == 'resolved'


POLL_INTERVAL = 0.2
SCHEDULING_SLACK = 0.1


def test_admin_announcement_shows_up_in_student_view_within_one_poll(tmp_path, make_registration) -> None:
    # Two stores over one database file play two separate processes, so the
    # student view only learns about the write by polling.
    engine = build_engine(f"sqlite:///{tmp_path / 'portal.db'}")
    Base.metadata.create_all(bind=engine, tables=[StoredRecord.__table__])
    student_store = RecordStore(sessionmaker(bind=engine), key_prefix='hafedpoly_')
    admin_store = RecordStore(sessionmaker(bind=engine), key_prefix='hafedpoly_')

    student = AuthService(student_store, PortalSession(student_store)).register(make_registration())
    admin_tab = PortalSession(admin_store)
    AuthService(admin_store, admin_tab, 'admin@hafedpoly.edu.ng', 'admin123').login('admin@hafedpoly.edu.ng', 'admin123')

    view = StudentView(student_store, student, poll_interval=POLL_INTERVAL).refresh()
    view.start_polling()
    try:
        AnnouncementBoard(admin_store, admin_tab).create('Exam Week', 'Exams start Monday')
        written_at = time.monotonic()
        while not view.announcements and time.monotonic() - written_at <= POLL_INTERVAL + SCHEDULING_SLACK:
            time.sleep(0.01)
        waited = time.monotonic() - written_at
    finally:
        view.stop_polling()
        engine.dispose()

    assert [(a.title, a.content) for a in view.announcements] == [('Exam Week', 'Exams start Monday')]
    assert waited <= POLL_INTERVAL + SCHEDULING_SLACK


def test_restart_keeps_session_and_data(store, auth, make_registration) -> None:
    student = auth.register(make_registration())
    ComplaintDesk(store, auth.session).submit('Other', 'still here after restart')

    restarted = PortalSession(store)
    restarted.hydrate()

    assert restarted.user == student
    assert [c.message for c in ComplaintDesk(store, restarted).mine()] == ['still here after restart']

import json

import pytest

from portal.models.record import StoredRecord
from portal.store import ANNOUNCEMENTS, COMPLAINTS, SESSION_KEY, STUDENTS


def _put_raw(store, key: str, value: str) -> None:
    db = store._session_factory()
    try:
        db.merge(StoredRecord(key=key, value=value))
        db.commit()
    finally:
        db.close()


def test_storage_keys_use_portal_prefix(store) -> None:
    assert store.storage_key(SESSION_KEY) == 'hafedpoly_user'
    assert store.storage_key(STUDENTS) == 'hafedpoly_students'
    assert store.storage_key(COMPLAINTS) == 'hafedpoly_complaints'
    assert store.storage_key(ANNOUNCEMENTS) == 'hafedpoly_announcements'


def test_unknown_collection_is_rejected(store) -> None:
    with pytest.raises(ValueError):
        store.read('grades')


def test_read_missing_collection_returns_empty_list(store) -> None:
    assert store.read(COMPLAINTS) == []


def test_write_replaces_whole_collection(store) -> None:
    store.write(ANNOUNCEMENTS, [{'id': 'ann_1'}, {'id': 'ann_2'}])
    store.write(ANNOUNCEMENTS, [{'id': 'ann_3'}])

    assert store.read(ANNOUNCEMENTS) == [{'id': 'ann_3'}]


def test_write_stores_compact_json_text(store) -> None:
    store.write(STUDENTS, [{'id': 'student_1', 'regNo': 'HP/2024/001'}])

    raw = store.snapshot()['hafedpoly_students']
    assert raw == '[{"id":"student_1","regNo":"HP/2024/001"}]'


@pytest.mark.parametrize(
    'raw_value',
    [
        'not json at all',
        '{"id": "comp_1"}',
        '[1, 2, 3]',
        '"a string"',
        '',
    ],
)
def test_unreadable_collection_degrades_to_empty(store, raw_value: str, caplog) -> None:
    _put_raw(store, 'hafedpoly_complaints', raw_value)

    assert store.read(COMPLAINTS) == []
    assert 'Treating complaints as empty' in caplog.text


def test_session_round_trip_and_clear(store) -> None:
    user = {'id': 'admin', 'name': 'System Administrator', 'email': 'admin@hafedpoly.edu.ng', 'role': 'admin'}

    store.write_session(user)
    assert store.read_session() == user

    store.clear_session()
    assert store.read_session() is None


def test_clear_session_is_idempotent(store) -> None:
    store.clear_session()
    store.clear_session()

    assert store.read_session() is None


@pytest.mark.parametrize('raw_value', ['{broken', '[]', 'null'])
def test_unreadable_session_reads_as_none(store, raw_value: str) -> None:
    _put_raw(store, 'hafedpoly_user', raw_value)

    assert store.read_session() is None


def test_subscribers_receive_written_records(store) -> None:
    received = []
    store.subscribe(COMPLAINTS, received.append)

    store.write(COMPLAINTS, [{'id': 'comp_1'}])
    store.write(ANNOUNCEMENTS, [{'id': 'ann_1'}])

    assert received == [[{'id': 'comp_1'}]]


def test_unsubscribe_stops_notifications(store) -> None:
    received = []
    unsubscribe = store.subscribe(COMPLAINTS, received.append)
    unsubscribe()

    store.write(COMPLAINTS, [{'id': 'comp_1'}])

    assert received == []


def test_failing_subscriber_does_not_block_others(store) -> None:
    received = []

    def broken(_records):
        raise RuntimeError('boom')

    store.subscribe(COMPLAINTS, broken)
    store.subscribe(COMPLAINTS, received.append)

    store.write(COMPLAINTS, [{'id': 'comp_1'}])

    assert received == [[{'id': 'comp_1'}]]
    assert store.read(COMPLAINTS) == [{'id': 'comp_1'}]


def test_revision_changes_on_write(store) -> None:
    assert store.revision(ANNOUNCEMENTS) is None

    store.write(ANNOUNCEMENTS, [])

    assert store.revision(ANNOUNCEMENTS) is not None


def test_restore_writes_known_keys_and_skips_others(store) -> None:
    received = []
    store.subscribe(STUDENTS, received.append)
    students = [{'id': 'student_1', 'email': 'a@x', 'password': 'pw'}]

    written = store.restore({
        'hafedpoly_students': json.dumps(students),
        'someone_elses_key': '[]',
    })

    assert written == ['hafedpoly_students']
    assert store.read(STUDENTS) == students
    assert received == [students]
    assert 'someone_elses_key' not in store.snapshot()

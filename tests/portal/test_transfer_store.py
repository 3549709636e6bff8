import json

import pytest

from portal.store import ANNOUNCEMENTS, STUDENTS
from portal.transfer_store import export_snapshot, import_snapshot


def test_export_writes_raw_values_by_storage_key(store, tmp_path) -> None:
    store.write(ANNOUNCEMENTS, [{'id': 'ann_1', 'title': 'T', 'content': 'C', 'createdAt': '2024-01-01T00:00:00.000Z'}])
    path = tmp_path / 'snapshot.json'

    count = export_snapshot(store, str(path))

    snapshot = json.loads(path.read_text(encoding='utf-8'))
    assert count == 1
    assert json.loads(snapshot['hafedpoly_announcements'])[0]['id'] == 'ann_1'


def test_import_loads_browser_snapshot(store, tmp_path) -> None:
    students = [{
        'name': 'Musa Ibrahim',
        'email': 'musa@x',
        'password': 'pw',
        'regNo': 'HP/2023/017',
        'department': 'Accountancy',
        'level': 'HND1',
        'role': 'student',
        'id': 'student_1700000000000',
    }]
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps({'hafedpoly_students': json.dumps(students)}), encoding='utf-8')

    assert import_snapshot(store, str(path)) == 1
    assert store.read(STUDENTS) == students


def test_import_rejects_non_text_values(store, tmp_path) -> None:
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps({'hafedpoly_students': []}), encoding='utf-8')

    with pytest.raises(ValueError):
        import_snapshot(store, str(path))

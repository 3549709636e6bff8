import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from portal.auth.service import AuthService  # noqa: E402
from portal.auth.session import PortalSession  # noqa: E402
from portal.database import Base  # noqa: E402
from portal.models.record import StoredRecord  # noqa: E402
from portal.models.user import StudentRegistration  # noqa: E402
from portal.store import RecordStore  # noqa: E402


@pytest.fixture
def record_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[StoredRecord.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[StoredRecord.__table__])
        engine.dispose()


@pytest.fixture
def store(record_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=record_engine)
    return RecordStore(testing_session_local, key_prefix='hafedpoly_')


@pytest.fixture
def portal_session(store):
    session = PortalSession(store)
    session.hydrate()
    return session


@pytest.fixture
def auth(store, portal_session):
    return AuthService(
        store,
        portal_session,
        admin_email='admin@hafedpoly.edu.ng',
        admin_password='admin123',
    )


@pytest.fixture
def make_registration():
    def _make(**overrides) -> StudentRegistration:
        fields = {
            'name': 'Amina Bello',
            'email': 'amina@student.hafedpoly.edu.ng',
            'password': 'secret-pass',
            'regNo': 'HP/2024/001',
            'department': 'Computer Science',
            'level': 'ND1',
        }
        fields.update(overrides)
        return StudentRegistration(**fields)

    return _make

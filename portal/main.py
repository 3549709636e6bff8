import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from portal.auth.service import AuthService
from portal.auth.session import PortalSession
from portal.chat import ChatPlaceholder
from portal.core import config
from portal.database import Base, SessionLocal, engine, ensure_record_schema
from portal.models import record
from portal.routes import admin_routes, auth_routes, entry_routes, student_routes
from portal.store import RecordStore

logging.basicConfig(level=config.LOG_LEVEL)

config.validate_runtime_config()

app = FastAPI(title='HAFEDPOLY Portal API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)

store = RecordStore(SessionLocal)
portal_session = PortalSession(store)
chat = ChatPlaceholder()
portal_session.on_change(chat.reset)

app.state.store = store
app.state.portal_session = portal_session
app.state.auth_service = AuthService(store, portal_session)
app.state.chat = chat


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine, tables=[record.StoredRecord.__table__])
        ensure_record_schema()
        user = portal_session.hydrate()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
        return
    logger.info('Portal started with %s.', f'{user.role} session {user.id}' if user else 'no session')


@app.exception_handler(SQLAlchemyError)
def database_unavailable(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error('Storage operation failed: %s', exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={'detail': 'Storage unavailable. Verify DATABASE_URL.'},
    )


@app.get('/')
def root():
    return {'status': 'HAFEDPOLY Portal API Running'}


app.include_router(entry_routes.router)
app.include_router(auth_routes.router, prefix='/auth')
app.include_router(student_routes.router, prefix='/student')
app.include_router(admin_routes.router, prefix='/admin')


if __name__ == '__main__':
    import os

    import uvicorn

    uvicorn.run(app, host='0.0.0.0', port=int(os.getenv('PORT', 8000)))

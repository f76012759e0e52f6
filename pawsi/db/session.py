from sqlmodel import Session, create_engine
from pawsi.core.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith('sqlite'):
        # Sweep workers open their own sessions from pool threads.
        return {'check_same_thread': False, 'timeout': 30}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)


def get_session():
    with Session(engine) as session:
        yield session


def new_session() -> Session:
    return Session(engine)

import os
import tempfile
from uuid import uuid4
from datetime import datetime
from typing import Optional

import pytest

_TEST_DB_DIR = tempfile.mkdtemp(prefix='pawsi-tests-')
TEST_DB_URL = os.getenv('TEST_DB_URL', f"sqlite:///{os.path.join(_TEST_DB_DIR, 'pawsi.db')}")
OPERATOR_EMAIL = 'mod@pawsi.test'
MAINTENANCE_TOKEN = 'sweep-token'

os.environ['DATABASE_URL'] = TEST_DB_URL
os.environ['OPERATOR_EMAILS'] = OPERATOR_EMAIL
os.environ['MAINTENANCE_TOKEN'] = MAINTENANCE_TOKEN
os.environ['BEST_EFFORT_INLINE'] = 'true'
os.environ['OWNER_SECRET_BCRYPT_ROUNDS'] = '4'
os.environ['RESEND_API_KEY'] = ''
os.environ['IMAGE_STORE_BUCKET'] = ''

from sqlmodel import Session

from pawsi.core.errors import DependencyError
from pawsi.core.operators import reset_operator_policy
from pawsi.db.init_db import init_db
from pawsi.db.session import engine
from pawsi.models.enums import ContentKind
from pawsi.models.user import User
from pawsi.services import cascade, content_store, notification_service
from pawsi.services.auth_service import create_access_token, hash_password
from pawsi.services.dispatch import reset_dispatcher


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise DependencyError('mail provider unavailable')
        self.sent.append((to, subject, html))

    def recipients(self) -> list[str]:
        return [to for to, _, _ in self.sent]


class RecordingImageStore:
    def __init__(self) -> None:
        self.purged: list[str] = []
        self.failing: set[str] = set()

    def purge(self, image_ref: str) -> None:
        if image_ref in self.failing:
            raise DependencyError(f"cannot purge {image_ref}")
        self.purged.append(image_ref)


@pytest.fixture(autouse=True)
def _fresh_database():
    init_db(drop_all=True)
    reset_operator_policy()
    reset_dispatcher()
    yield
    reset_dispatcher()


@pytest.fixture
def mailer(monkeypatch):
    fake = RecordingMailer()
    monkeypatch.setattr(notification_service, 'get_mailer', lambda: fake)
    return fake


@pytest.fixture
def image_store(monkeypatch):
    fake = RecordingImageStore()
    monkeypatch.setattr(cascade, 'get_image_store', lambda: fake)
    return fake


@pytest.fixture(autouse=True)
def _quiet_side_effects(mailer, image_store):
    # Every test gets the recording fakes, never a real provider.
    yield


@pytest.fixture
def session():
    with Session(engine) as db:
        yield db


@pytest.fixture
def make_user(session):
    def _make(email: Optional[str] = None, display_name: Optional[str] = None) -> User:
        user = User(
            email=email or f"{uuid4().hex[:10]}@pawsi.test",
            hashed_password=hash_password('secret123'),
            display_name=display_name,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def operator(make_user) -> User:
    return make_user(OPERATOR_EMAIL, display_name='Moderación')


@pytest.fixture
def make_listing(session):
    def _make(
        kind: ContentKind = ContentKind.LOST,
        owner: Optional[User] = None,
        now: Optional[datetime] = None,
        **fields,
    ):
        payload = {'title': f"{kind.value} listing", 'description': 'Perro marrón con collar azul'}
        if kind == ContentKind.CLASSIFIED:
            payload['category'] = 'accesorios'
        if kind == ContentKind.VETERINARIAN:
            payload = {'name': 'Clínica Patitas', 'address': 'Av. Siempre Viva 742'}
        payload.update(fields)
        item, secret = content_store.create_content(
            session, kind, payload, owner_id=owner.id if owner else None, now=now
        )
        return item, secret

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from pawsi.main import app

    with TestClient(app) as test_client:
        yield test_client

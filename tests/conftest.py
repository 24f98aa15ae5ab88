import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Base SQLite pour les tests AVANT d'importer app (la config lit l'env à l'import)
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["MAIL_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.errors import NotificationError
from app.core.security import create_access_token
from app.main import app
from app.models.user import User
from app.services.mail_service import get_mailer


class FakeMailer:
    """Boîte d'envoi en mémoire à la place du relais mail"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.outbox = []

    def _record(self, kind, user, otp=None):
        if self.fail:
            raise NotificationError("Could not send email")
        self.outbox.append({"kind": kind, "to": user.email, "otp": otp})

    def send_welcome(self, user):
        self._record("welcome", user)

    def send_verify_otp(self, user, otp):
        self._record("verify", user, otp)

    def send_reset_otp(self, user, otp):
        self._record("reset", user, otp)

    def last_otp(self, kind):
        return [m["otp"] for m in self.outbox if m["kind"] == kind][-1]


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


@pytest.fixture
def mailer():
    fake = FakeMailer()
    app.dependency_overrides[get_mailer] = lambda: fake
    return fake


@pytest.fixture
def failing_mailer():
    fake = FakeMailer(fail=True)
    app.dependency_overrides[get_mailer] = lambda: fake
    return fake


@pytest.fixture
def client(mailer):
    """Client de test FastAPI"""
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def make_user(db):
    """Crée un utilisateur directement en base"""
    def _make_user(email="test@example.com", name="Test User", password="pass123"):
        user = User(name=name, email=email)
        user.set_password(password)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def test_user(make_user):
    return make_user()


@pytest.fixture
def auth_headers(test_user):
    """Header Bearer pour l'utilisateur de test"""
    token = create_access_token(test_user.id, settings)
    return {"Authorization": f"Bearer {token}"}

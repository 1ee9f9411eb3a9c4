import os
import sys
from datetime import timedelta

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config
from fitscore import create_app
from fitscore.extensions import db
from fitscore.models.evaluation import Evaluation
from fitscore.models.user import User
from fitscore.services.scoring import ANSWER_FIELDS, Answers
from fitscore.utils.dates import utcnow

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    REDIS_URL = ""
    MAIL_BACKEND = "console"
    ADMIN_REPORT_EMAIL = "reports@example.com"
    ASYNC_EVALUATION_DELAY_SEC = 0
    SCHEDULED_REPORT_DELAY_SEC = 0
    REALTIME_ANALYTICS_DELAY_SEC = 0
    BATCH_ANALYTICS_DELAY_SEC = 0
    LOG_LEVEL = "WARNING"


def answers_payload(value=3, **overrides):
    data = {f: value for f in ANSWER_FIELDS}
    data.update(overrides)
    return data


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    user = User(email=ADMIN_EMAIL, role="admin")
    user.set_password(ADMIN_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin):
    resp = client.post("/auth/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 302
    return client


@pytest.fixture
def make_evaluation(app):
    """Insert an Evaluation; ``fit_score``/``fit_classification`` may be forced."""
    def _make(name="Ana Souza", email="ana@example.com", value=3, age=timedelta(0), **overrides):
        ev = Evaluation.from_answers(name, email, Answers.from_mapping(answers_payload(value)))
        ev.created_at = utcnow() - age
        for k, v in overrides.items():
            setattr(ev, k, v)
        db.session.add(ev)
        db.session.commit()
        return ev
    return _make

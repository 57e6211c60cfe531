# tests/conftest.py
import pytest
from lesionlog import create_app
from lesionlog.config.settings import Config
from lesionlog.repositories.result_repository import ResultRepository
from lesionlog.utils.exceptions import InternalError

STRONG_PASSWORD = 'Str0ng!Pass'

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    BCRYPT_ROUNDS = 4
    JWT_SECRET_KEY = 'testing-jwt-secret-key-that-is-long-enough-for-hs256'
    FRONTEND_URL = 'http://frontend.test'

class RecordingMailer:
    """Stands in for the SendGrid sender; keeps every message it was asked to send."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to_email, subject, text=None, html=None, attachment_path=None, attachment_name=None,
             attachment_type='application/pdf'):
        if self.fail:
            raise InternalError("Failed to send email: transport unavailable")
        attachment = None
        if attachment_path:
            with open(attachment_path, 'rb') as f:
                attachment = f.read()
        self.sent.append({
            "to": to_email,
            "subject": subject,
            "text": text,
            "html": html,
            "attachment_path": attachment_path,
            "attachment_name": attachment_name,
            "attachment": attachment
        })
        return 202

@pytest.fixture
def mailer():
    return RecordingMailer()

@pytest.fixture
def app(mailer, tmp_path):
    app = create_app(TestingConfig, mailer=mailer)
    app.config['UPLOAD_DIR'] = str(tmp_path / 'uploads')
    yield app

@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client

def signup(client, username, email, role=None, password=STRONG_PASSWORD):
    payload = {
        'username': username,
        'email': email,
        'password': password,
        'confirmPassword': password
    }
    if role:
        payload['role'] = role
    return client.post('/api/auth/signup', json=payload)

def signin(client, email, password=STRONG_PASSWORD):
    return client.post('/api/auth/signin', json={'email': email, 'password': password})

def bearer(token):
    return {'Authorization': f'Bearer {token}'}

@pytest.fixture
def user_token(client):
    signup(client, 'alice', 'alice@example.com')
    return signin(client, 'alice@example.com').json['token']

@pytest.fixture
def admin_token(client):
    signup(client, 'root', 'root@example.com', role='admin')
    return signin(client, 'root@example.com').json['token']

def seed(app, rows):
    """rows: (confidence, prediction, user_id, created_at)"""
    with app.app_context():
        repository = ResultRepository()
        for confidence, prediction, user_id, created_at in rows:
            repository.create_result(confidence, prediction, user_id, created_at=created_at)

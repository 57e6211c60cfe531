# tests/test_auth.py
from datetime import timedelta
import pytest
from flask_jwt_extended import create_access_token
from conftest import STRONG_PASSWORD, bearer, signin, signup
from lesionlog.services.auth_service import AuthService, is_strong_password
from lesionlog.utils.exceptions import TokenExpiredError, ValidationError

def test_register(client, mailer):
    response = signup(client, 'testuser', 'test@example.com')
    assert response.status_code == 201
    assert response.json['message'] == 'User signed up successfully.'
    assert response.json['user']['role'] == 'user'
    assert 'password' not in response.json['user']
    assert mailer.sent[0]['to'] == 'test@example.com'
    assert mailer.sent[0]['subject'] == 'Signup Successful - Welcome!'

def test_register_survives_welcome_email_failure(client, mailer):
    mailer.fail = True
    response = signup(client, 'testuser', 'test@example.com')
    assert response.status_code == 201
    assert mailer.sent == []

def test_register_missing_fields(client):
    response = client.post('/api/auth/signup', json={'username': 'testuser', 'password': STRONG_PASSWORD})
    assert response.status_code == 400
    assert response.json == {"success": False, "message": "All fields are required."}

def test_register_without_json_body(client):
    response = client.post('/api/auth/signup', data='x', content_type='text/plain')
    assert response.status_code == 400
    assert response.json == {"success": False, "message": "All fields are required."}

    response = client.post('/api/auth/signup')
    assert response.status_code == 400
    assert response.json['success'] is False

def test_method_not_allowed_uses_envelope(client):
    response = client.get('/api/auth/signup')
    assert response.status_code == 405
    assert response.json['success'] is False

def test_register_password_mismatch(client):
    response = client.post('/api/auth/signup', json={
        'username': 'testuser',
        'email': 'test@example.com',
        'password': STRONG_PASSWORD,
        'confirmPassword': STRONG_PASSWORD + 'x'
    })
    assert response.status_code == 400
    assert response.json['message'] == 'Passwords do not match.'

@pytest.mark.parametrize('password', [
    'Sh0rt!',        # too short
    'nouppercase1!',
    'NOLOWERCASE1!',
    'NoDigitsHere!',
    'NoSymbols123',
])
def test_register_rejects_weak_passwords(client, password):
    response = signup(client, 'testuser', 'test@example.com', password=password)
    assert response.status_code == 400
    assert 'Password must be at least 8 characters' in response.json['message']

@pytest.mark.parametrize('password', ['Abcdef1!', 'Z9y8x7w6$', STRONG_PASSWORD])
def test_strong_passwords_accepted(password):
    assert is_strong_password(password)

def test_register_rejects_unknown_role(client):
    response = signup(client, 'testuser', 'test@example.com', role='superuser')
    assert response.status_code == 400

def test_register_duplicate_username_or_email(client):
    signup(client, 'testuser', 'test@example.com')
    response = signup(client, 'testuser', 'other@example.com')
    assert response.status_code == 409
    response = signup(client, 'otheruser', 'test@example.com')
    assert response.status_code == 409
    assert response.json['message'] == 'Username or email already exists.'

def test_login(client):
    signup(client, 'testuser', 'test@example.com', role='admin')
    response = signin(client, 'test@example.com')
    assert response.status_code == 200
    assert 'token' in response.json
    assert response.json['user']['username'] == 'testuser'
    assert response.json['user']['role'] == 'admin'
    assert 'password' not in response.json['user']

def test_login_unknown_email(client):
    response = signin(client, 'nobody@example.com')
    assert response.status_code == 404

def test_login_wrong_password(client):
    signup(client, 'testuser', 'test@example.com')
    response = signin(client, 'test@example.com', password='Wr0ng!Pass')
    assert response.status_code == 401
    assert response.json['success'] is False

def test_forgot_password_sends_reset_link(client, mailer):
    signup(client, 'testuser', 'test@example.com')
    response = client.post('/api/auth/forgot-password', json={'email': 'test@example.com'})
    assert response.status_code == 200
    reset_mail = mailer.sent[-1]
    assert reset_mail['subject'] == 'Password Reset Request'
    assert 'http://frontend.test/reset-password?token=' in reset_mail['html']

def test_forgot_password_unknown_email(client):
    response = client.post('/api/auth/forgot-password', json={'email': 'nobody@example.com'})
    assert response.status_code == 404

def test_forgot_password_delivery_failure_is_reported(client, mailer):
    signup(client, 'testuser', 'test@example.com')
    mailer.fail = True
    response = client.post('/api/auth/forgot-password', json={'email': 'test@example.com'})
    assert response.status_code == 500

def test_reset_password_flow(client, mailer):
    signup(client, 'testuser', 'test@example.com')
    client.post('/api/auth/forgot-password', json={'email': 'test@example.com'})
    token = mailer.sent[-1]['html'].split('token=')[1].split('"')[0]

    new_password = 'N3w!Password'
    response = client.post('/api/auth/reset-password', json={
        'token': token,
        'newPassword': new_password,
        'confirmNewPassword': new_password
    })
    assert response.status_code == 200
    assert signin(client, 'test@example.com').status_code == 401
    assert signin(client, 'test@example.com', password=new_password).status_code == 200

def test_reset_password_mismatch(client):
    response = client.post('/api/auth/reset-password', json={
        'token': 'whatever',
        'newPassword': 'N3w!Password',
        'confirmNewPassword': 'N3w!Passwordx'
    })
    assert response.status_code == 400
    assert response.json['message'] == 'Passwords do not match.'

def test_reset_password_expired_token(app, client):
    signup(client, 'testuser', 'test@example.com')
    with app.app_context():
        token = create_access_token(
            identity='1',
            additional_claims={'purpose': 'password_reset'},
            expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(TokenExpiredError):
            AuthService().reset_password(token, 'N3w!Password', 'N3w!Password')

    response = client.post('/api/auth/reset-password', json={
        'token': token,
        'newPassword': 'N3w!Password',
        'confirmNewPassword': 'N3w!Password'
    })
    assert response.status_code == 400
    assert response.json['message'] == 'Reset token has expired.'

def test_session_token_cannot_reset_password(app, client):
    signup(client, 'testuser', 'test@example.com')
    token = signin(client, 'test@example.com').json['token']
    with app.app_context():
        with pytest.raises(ValidationError):
            AuthService().reset_password(token, 'N3w!Password', 'N3w!Password')

def test_reset_token_is_not_a_session_token(client, mailer):
    signup(client, 'testuser', 'test@example.com')
    client.post('/api/auth/forgot-password', json={'email': 'test@example.com'})
    token = mailer.sent[-1]['html'].split('token=')[1].split('"')[0]
    response = client.get('/api/users/profile', headers=bearer(token))
    assert response.status_code == 401

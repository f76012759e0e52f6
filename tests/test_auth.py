from uuid import uuid4

from pawsi.services.auth_service import create_access_token, create_refresh_token


def test_register_login_refresh(client):
    email = f"{uuid4().hex[:10]}@b.com"
    r = client.post('/api/v1/auth/register', json={'email': email, 'password': 'secret123', 'display_name': 'Ana'})
    assert r.status_code == 201
    assert r.json()['display_name'] == 'Ana'

    login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
    assert login.status_code == 200
    refresh_token = login.json()['refresh_token']

    refresh = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
    assert refresh.status_code == 200

    reused = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
    assert reused.status_code == 401

    me = client.get('/api/v1/me', headers={'Authorization': f"Bearer {refresh.json()['access_token']}"})
    assert me.status_code == 200
    assert me.json()['email'] == email


def test_duplicate_registration_is_rejected(client):
    payload = {'email': 'dup@b.com', 'password': 'secret123'}
    assert client.post('/api/v1/auth/register', json=payload).status_code == 201
    assert client.post('/api/v1/auth/register', json=payload).status_code == 400


def test_login_with_wrong_password(client):
    client.post('/api/v1/auth/register', json={'email': 'who@b.com', 'password': 'secret123'})
    response = client.post('/api/v1/auth/login', json={'email': 'who@b.com', 'password': 'wrongpass'})
    assert response.status_code == 401
    missing = client.post('/api/v1/auth/login', json={'email': 'nobody@b.com', 'password': 'secret123'})
    assert missing.status_code == 401


def test_operator_flag(client, make_user, operator, auth_headers):
    assert client.get('/api/v1/me/operator', headers=auth_headers(operator)).json() == {'is_operator': True}
    assert client.get('/api/v1/me/operator', headers=auth_headers(make_user())).json() == {'is_operator': False}


def test_tokens_issued_in_the_same_second_differ():
    first, _ = create_refresh_token('user-1')
    second, _ = create_refresh_token('user-1')
    assert first != second
    assert create_access_token('user-1') != create_access_token('user-1')

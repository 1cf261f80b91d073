"""
Registration, login and token checks
"""
from datetime import timedelta

from flask_jwt_extended import create_access_token

from tests.conftest import register_and_login


def test_register_returns_account(client):
    response = client.post('/api/auth/register', json={
        'name': 'Dra. Ana', 'cro': 'CRO-SP 1', 'email': 'Ana@Clinica.com', 'password': 'segredo123',
        'clinic': 'Sorriso', 'phone': '1133334444'
    })
    assert response.status_code == 201
    data = response.get_json()
    assert data['success'] is True
    assert data['dentista']['email'] == 'ana@clinica.com'
    assert data['dentista']['clinica'] == 'Sorriso'
    assert 'senha_hash' not in data['dentista']


def test_register_requires_fields(client):
    response = client.post('/api/auth/register', json={'name': 'Ana', 'email': 'a@b.com', 'password': 'segredo123'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_register_short_password(client):
    response = client.post('/api/auth/register', json={
        'name': 'Ana', 'cro': '1', 'email': 'a@b.com', 'password': '123'
    })
    assert response.status_code == 400


def test_register_duplicate_email_is_case_insensitive(client):
    register_and_login(client, email='ana@clinica.com')
    response = client.post('/api/auth/register', json={
        'name': 'Outra', 'cro': '2', 'email': 'ANA@CLINICA.COM', 'password': 'segredo123'
    })
    assert response.status_code == 400
    assert response.get_json()['erro'] == 'Email já cadastrado'


def test_login_same_error_for_unknown_email_and_wrong_password(client):
    register_and_login(client, email='ana@clinica.com', password='segredo123')

    wrong_password = client.post('/api/auth/login', json={'email': 'ana@clinica.com', 'password': 'errada'})
    unknown_email = client.post('/api/auth/login', json={'email': 'ninguem@clinica.com', 'password': 'segredo123'})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()


def test_login_missing_fields(client):
    response = client.post('/api/auth/login', json={'email': 'ana@clinica.com'})
    assert response.status_code == 400


def test_login_tracks_login_count(client, app):
    register_and_login(client)
    client.post('/api/auth/login', json={'email': 'ana@clinica.com', 'password': 'segredo123'})

    from odonto.models import Dentista
    with app.app_context():
        dentista = Dentista.query.filter_by(email='ana@clinica.com').first()
        assert dentista.total_logins == 2
        assert dentista.ultimo_login is not None


def test_verify_with_valid_token(client, auth_headers):
    response = client.get('/api/auth/verify', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['dentista']['email'] == 'ana@clinica.com'


def test_missing_token_is_401(client):
    response = client.get('/api/auth/verify')
    assert response.status_code == 401
    assert response.get_json() == {'success': False, 'erro': 'Token não fornecido'}


def test_invalid_token_is_403(client):
    response = client.get('/api/auth/verify', headers={'Authorization': 'Bearer nao-e-um-token'})
    assert response.status_code == 403
    assert response.get_json()['erro'] == 'Token inválido'


def test_expired_token_is_403(client, app, auth_headers):
    with app.app_context():
        token = create_access_token(identity='1', expires_delta=timedelta(seconds=-1))

    response = client.get('/api/auth/verify', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 403
    assert response.get_json()['erro'] == 'Sessão expirada. Faça login novamente.'


def test_token_for_deleted_account_is_401(client, app):
    with app.app_context():
        token = create_access_token(identity='999')

    response = client.get('/api/pacientes', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401


def test_deactivated_account_cannot_login(client, app, auth_headers):
    from odonto.extensions import db
    from odonto.models import Dentista

    with app.app_context():
        dentista = Dentista.query.filter_by(email='ana@clinica.com').first()
        dentista.ativo = False
        db.session.commit()

    response = client.post('/api/auth/login', json={'email': 'ana@clinica.com', 'password': 'segredo123'})
    assert response.status_code == 403

    response = client.get('/api/auth/verify', headers=auth_headers)
    assert response.status_code == 403


def test_update_profile(client, auth_headers):
    response = client.put('/api/auth/perfil', json={'clinic': 'Nova Clínica', 'specialty': 'Ortodontia'}, headers=auth_headers)
    assert response.status_code == 200
    dentista = response.get_json()['dentista']
    assert dentista['clinica'] == 'Nova Clínica'
    assert dentista['especialidade'] == 'Ortodontia'

    response = client.put('/api/auth/perfil', json={'name': '  '}, headers=auth_headers)
    assert response.status_code == 400

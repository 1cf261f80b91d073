"""
Pytest configuration and fixtures
"""
import pytest

from odonto import create_app
from odonto.extensions import db


@pytest.fixture
def app(tmp_path):
    """
    App on a throwaway SQLite file. A file (not :memory:) so the dashboard's
    worker threads each open their own connection to the same database.
    """
    app = create_app('testing', test_config={
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def register_and_login(client, email='ana@clinica.com', password='segredo123', name='Dra. Ana', **extra):
    """Create an account and return Authorization headers for it."""
    payload = {'name': name, 'cro': 'CRO-SP 12345', 'email': email, 'password': password}
    payload.update(extra)
    response = client.post('/api/auth/register', json=payload)
    assert response.status_code == 201, response.get_json()

    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return {'Authorization': f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def auth_headers(client):
    """Headers for tenant A"""
    return register_and_login(client)


@pytest.fixture
def other_headers(client):
    """Headers for tenant B"""
    return register_and_login(client, email='bruno@outra.com', name='Dr. Bruno')


def create_paciente(client, headers, **fields):
    payload = {'nome': 'João da Silva', 'cpf': '123.456.789-00', 'cep': '01001-000', 'celular': '11999990000'}
    payload.update(fields)
    response = client.post('/api/pacientes', json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['paciente']


def create_agendamento(client, headers, **fields):
    payload = {'data': '2030-05-10', 'horario': '10:30', 'procedimento': 'Limpeza'}
    payload.update(fields)
    response = client.post('/api/agendamentos', json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['agendamento']

"""
Invoices
"""
from datetime import date

from tests.conftest import create_paciente


def test_numbers_are_sequential_per_account(client, auth_headers, other_headers):
    primeira = client.post('/api/notas', json={'valor': 150}, headers=auth_headers).get_json()['nota']
    segunda = client.post('/api/notas', json={'valor': 90}, headers=auth_headers).get_json()['nota']
    outra_conta = client.post('/api/notas', json={'valor': 50}, headers=other_headers).get_json()['nota']

    assert primeira['numero'] == 'NF000001'
    assert segunda['numero'] == 'NF000002'
    assert outra_conta['numero'] == 'NF000001'
    assert primeira['status'] == 'emitida'
    assert primeira['dataEmissao'] == date.today().isoformat()


def test_requires_value(client, auth_headers):
    assert client.post('/api/notas', json={'descricaoServico': 'Limpeza'}, headers=auth_headers).status_code == 400


def test_incomplete_patient_is_rejected(client, auth_headers):
    paciente = create_paciente(client, auth_headers, cpf='')
    response = client.post('/api/notas', json={'valor': 100, 'pacienteId': paciente['id']}, headers=auth_headers)
    assert response.status_code == 400
    data = response.get_json()
    assert data['cadastroIncompleto'] is True
    assert data['camposFaltando'] == ['cpf']


def test_complete_patient_invoice(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    response = client.post('/api/notas', json={
        'valor': '350.00', 'pacienteId': paciente['id'], 'descricaoServico': 'Canal'
    }, headers=auth_headers)
    assert response.status_code == 201
    nota = response.get_json()['nota']
    assert nota['pacienteNome'] == 'João da Silva'
    assert nota['valor'] == 350.0


def test_list_newest_first(client, auth_headers):
    client.post('/api/notas', json={'valor': 10}, headers=auth_headers)
    client.post('/api/notas', json={'valor': 20}, headers=auth_headers)

    notas = client.get('/api/notas', headers=auth_headers).get_json()['notas']
    assert [n['numero'] for n in notas] == ['NF000002', 'NF000001']

"""
Malformed payloads are rejected with 400, never a server error
"""
import pytest

from odonto.utils import parse_valor

from tests.conftest import create_agendamento, create_paciente


@pytest.mark.parametrize('valor', ['NaN', 'nan', 'Infinity', '-Infinity', 'sNaN', True, [], {}])
def test_parse_valor_rejects_non_finite_and_non_scalar(valor):
    assert parse_valor(valor) is None


def test_parse_valor_rounds_to_cents():
    assert str(parse_valor('199.999')) == '200.00'
    assert str(parse_valor(35)) == '35.00'


@pytest.mark.parametrize('url', [
    '/api/pacientes', '/api/agendamentos', '/api/financeiro', '/api/prontuarios', '/api/notas',
    '/api/dentistas', '/api/fila-encaixe', '/api/receitas', '/api/atestados', '/api/anamnese',
])
def test_list_body_is_rejected(client, auth_headers, url):
    response = client.post(url, json=[{'nome': 'x'}], headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_scalar_body_is_rejected_on_settings(client, auth_headers):
    response = client.put('/api/config-clinica', json='texto', headers=auth_headers)
    assert response.status_code == 400


def test_register_with_list_body(client):
    response = client.post('/api/auth/register', json=['ana@clinica.com'])
    assert response.status_code == 400


def test_login_with_numeric_password(client, auth_headers):
    response = client.post('/api/auth/login', json={'email': 'ana@clinica.com', 'password': 123456})
    assert response.status_code == 400


def test_public_confirmation_with_list_body(client):
    response = client.post('/api/agendamentos/confirmar', json=['ABC234', 'confirmar'])
    assert response.status_code == 400
    assert response.get_json()['erro'] == 'Código inválido'


def test_patient_name_must_be_text(client, auth_headers):
    response = client.post('/api/pacientes', json={'nome': 12345}, headers=auth_headers)
    assert response.status_code == 400
    assert 'nome' in response.get_json()['erro']


def test_patient_update_rejects_object_field(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    response = client.put(f"/api/pacientes/{paciente['id']}", json={'cidade': {'nome': 'Santos'}}, headers=auth_headers)
    assert response.status_code == 400

    atual = client.get(f"/api/pacientes/{paciente['id']}", headers=auth_headers).get_json()['paciente']
    assert atual['cidade'] is None


def test_appointment_status_must_be_text(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers)
    response = client.put(f"/api/agendamentos/{agendamento['id']}", json={'status': 5}, headers=auth_headers)
    assert response.status_code == 400

    atual = client.get(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).get_json()['agendamento']
    assert atual['status'] == 'agendado'


def test_appointment_snapshot_name_must_be_text(client, auth_headers):
    response = client.post('/api/agendamentos', json={
        'data': '2030-05-10', 'horario': '10:30', 'pacienteNome': ['Ana'], 'pacienteTelefone': 11999990000
    }, headers=auth_headers)
    assert response.status_code == 400


def test_ledger_rejects_nan_amount(client, auth_headers):
    response = client.post('/api/financeiro', json={
        'tipo': 'receita', 'descricao': 'Consulta', 'valor': 'NaN', 'data': '2030-05-10'
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['erro'] == 'Valor inválido'
    assert client.get('/api/financeiro', headers=auth_headers).get_json()['total'] == 0


def test_ledger_rejects_non_text_fields(client, auth_headers):
    response = client.post('/api/financeiro', json={
        'tipo': ['receita'], 'descricao': 'Consulta', 'valor': 100, 'data': '2030-05-10'
    }, headers=auth_headers)
    assert response.status_code == 400

    response = client.post('/api/financeiro', json={
        'tipo': 'receita', 'descricao': 42, 'valor': 100, 'data': '2030-05-10'
    }, headers=auth_headers)
    assert response.status_code == 400


def test_ledger_status_update_must_be_text(client, auth_headers):
    entry = client.post('/api/financeiro', json={
        'tipo': 'despesa', 'descricao': 'Aluguel', 'valor': 1500, 'data': '2030-05-10'
    }, headers=auth_headers).get_json()['movimentacao']

    response = client.put(f"/api/financeiro/{entry['id']}", json={'status': True}, headers=auth_headers)
    assert response.status_code == 400


def test_invoice_rejects_infinite_amount(client, auth_headers):
    response = client.post('/api/notas', json={'valor': 'Infinity'}, headers=auth_headers)
    assert response.status_code == 400


def test_clinical_note_description_must_be_text(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    response = client.post('/api/prontuarios', json={'pacienteId': paciente['id'], 'descricao': 99}, headers=auth_headers)
    assert response.status_code == 400


def test_queue_name_must_be_text(client, auth_headers):
    response = client.post('/api/fila-encaixe', json={'nome': 1, 'telefone': '11988887777'}, headers=auth_headers)
    assert response.status_code == 400


def test_professional_name_must_be_text(client, auth_headers):
    response = client.post('/api/dentistas', json={'nome': {'primeiro': 'Carlos'}}, headers=auth_headers)
    assert response.status_code == 400


def test_profile_fields_must_be_text(client, auth_headers):
    response = client.put('/api/auth/perfil', json={'phone': 11999990000}, headers=auth_headers)
    assert response.status_code == 400


def test_settings_text_fields_must_be_text(client, auth_headers):
    response = client.put('/api/config-clinica', json={'nome_clinica': ['Sorriso']}, headers=auth_headers)
    assert response.status_code == 400

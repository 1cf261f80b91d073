"""
Prescriptions
"""
from tests.conftest import create_paciente

AMOXICILINA = {'nome': 'Amoxicilina 500mg', 'posologia': '1 cápsula de 8/8h por 7 dias'}


def test_create_and_list(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    response = client.post('/api/receitas', json={
        'pacienteId': paciente['id'], 'medicamentos': [AMOXICILINA], 'observacoes': 'Tomar após refeições'
    }, headers=auth_headers)
    assert response.status_code == 201
    receita = response.get_json()['receita']
    assert receita['tipo'] == 'simples'
    assert receita['medicamentos'] == [AMOXICILINA]

    response = client.get(f"/api/receitas/{paciente['id']}", headers=auth_headers)
    assert response.status_code == 200
    receitas = response.get_json()['receitas']
    assert [r['id'] for r in receitas] == [receita['id']]
    assert receitas[0]['observacoes'] == 'Tomar após refeições'


def test_newest_first(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    ids = [
        client.post('/api/receitas', json={'pacienteId': paciente['id'], 'medicamentos': [nome]}, headers=auth_headers).get_json()['receita']['id']
        for nome in ('Ibuprofeno', 'Paracetamol')
    ]
    receitas = client.get(f"/api/receitas/{paciente['id']}", headers=auth_headers).get_json()['receitas']
    assert [r['id'] for r in receitas] == list(reversed(ids))


def test_requires_patient_and_items(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    assert client.post('/api/receitas', json={'pacienteId': paciente['id']}, headers=auth_headers).status_code == 400
    assert client.post('/api/receitas', json={'pacienteId': paciente['id'], 'medicamentos': []}, headers=auth_headers).status_code == 400
    assert client.post('/api/receitas', json={'medicamentos': [AMOXICILINA]}, headers=auth_headers).status_code == 400
    assert client.post('/api/receitas', json={'pacienteId': paciente['id'], 'medicamentos': 'Amoxicilina'}, headers=auth_headers).status_code == 400
    assert client.post('/api/receitas', json={'pacienteId': paciente['id'], 'medicamentos': [1, 2]}, headers=auth_headers).status_code == 400


def test_delete(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    receita = client.post('/api/receitas', json={'pacienteId': paciente['id'], 'medicamentos': [AMOXICILINA]}, headers=auth_headers).get_json()['receita']

    response = client.delete(f"/api/receitas/{receita['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert client.get(f"/api/receitas/{paciente['id']}", headers=auth_headers).get_json()['receitas'] == []
    assert client.delete(f"/api/receitas/{receita['id']}", headers=auth_headers).status_code == 404

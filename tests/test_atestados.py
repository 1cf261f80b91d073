"""
Medical certificates
"""
from tests.conftest import create_paciente


def test_create_with_defaults(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    response = client.post('/api/atestados', json={'pacienteId': paciente['id']}, headers=auth_headers)
    assert response.status_code == 201
    atestado = response.get_json()['atestado']
    assert atestado['tipo'] == 'atestado'
    assert atestado['dias'] == 1


def test_create_declaration_and_list(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    client.post('/api/atestados', json={
        'pacienteId': paciente['id'], 'tipo': 'declaracao', 'horario': 'das 08:00 às 10:00', 'cid': 'K02.1'
    }, headers=auth_headers)

    response = client.get(f"/api/atestados/{paciente['id']}", headers=auth_headers)
    assert response.status_code == 200
    atestados = response.get_json()['atestados']
    assert len(atestados) == 1
    assert atestados[0]['tipo'] == 'declaracao'
    assert atestados[0]['horario'] == 'das 08:00 às 10:00'
    assert atestados[0]['cid'] == 'K02.1'


def test_requires_patient(client, auth_headers):
    response = client.post('/api/atestados', json={'dias': 2}, headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['erro'] == 'Paciente obrigatório'


def test_rejects_bad_days(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    for dias in (0, -1, 'dois'):
        response = client.post('/api/atestados', json={'pacienteId': paciente['id'], 'dias': dias}, headers=auth_headers)
        assert response.status_code == 400


def test_delete(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    atestado = client.post('/api/atestados', json={'pacienteId': paciente['id'], 'dias': 3}, headers=auth_headers).get_json()['atestado']

    assert client.delete(f"/api/atestados/{atestado['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/atestados/{paciente['id']}", headers=auth_headers).get_json()['atestados'] == []

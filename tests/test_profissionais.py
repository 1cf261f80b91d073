"""
Practitioner roster
"""


def _criar(client, headers, **fields):
    payload = {'nome': 'Dr. Carlos'}
    payload.update(fields)
    response = client.post('/api/dentistas', json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['dentista']


def test_create_applies_defaults(client, auth_headers):
    profissional = _criar(client, auth_headers)
    assert profissional['especialidade'] == 'Clínico Geral'
    assert profissional['icone'] == '🦷'
    assert profissional['cor'] == '#2d7a5f'
    assert profissional['intervalo_minutos'] == 30
    assert (profissional['hora_entrada'], profissional['hora_saida']) == ('08:00', '18:00')
    assert (profissional['almoco_inicio'], profissional['almoco_fim']) == ('12:00', '13:00')


def test_create_requires_name(client, auth_headers):
    assert client.post('/api/dentistas', json={'cro': '123'}, headers=auth_headers).status_code == 400


def test_update_is_partial(client, auth_headers):
    profissional = _criar(client, auth_headers, especialidade='Ortodontia')
    response = client.put(f"/api/dentistas/{profissional['id']}", json={'cor': '#ff0000'}, headers=auth_headers)
    assert response.status_code == 200
    atualizado = response.get_json()['dentista']
    assert atualizado['cor'] == '#ff0000'
    assert atualizado['especialidade'] == 'Ortodontia'


def test_patch_schedule(client, auth_headers):
    profissional = _criar(client, auth_headers)
    response = client.patch(f"/api/dentistas/{profissional['id']}/config", json={
        'intervalo_minutos': 45, 'hora_entrada': '07:30', 'nome': 'Ignorado'
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['config']['intervalo_minutos'] == 45
    assert response.get_json()['config']['hora_entrada'] == '07:30'

    stored = client.get(f"/api/dentistas/{profissional['id']}", headers=auth_headers).get_json()['dentista']
    assert stored['nome'] == 'Dr. Carlos'


def test_patch_schedule_rejects_bad_time(client, auth_headers):
    profissional = _criar(client, auth_headers)
    response = client.patch(f"/api/dentistas/{profissional['id']}/config", json={'hora_saida': '19h'}, headers=auth_headers)
    assert response.status_code == 400


def test_delete_requires_account_password(client, auth_headers):
    profissional = _criar(client, auth_headers)
    url = f"/api/dentistas/{profissional['id']}"

    assert client.delete(url, headers=auth_headers).status_code == 400
    assert client.delete(f'{url}?senha=errada', headers=auth_headers).status_code == 403
    assert client.get(url, headers=auth_headers).status_code == 200

    assert client.delete(f'{url}?senha=segredo123', headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404
    assert client.get('/api/dentistas', headers=auth_headers).get_json()['dentistas'] == []

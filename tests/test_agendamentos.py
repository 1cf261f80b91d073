"""
Appointments and the public confirmation link
"""
from odonto.services.confirmation_code import ALFABETO, TAMANHO_CODIGO

from tests.conftest import create_agendamento, create_paciente


def test_create_allocates_confirmation_code(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers, pacienteNome='Avulso')
    codigo = agendamento['codigoConfirmacao']
    assert len(codigo) == TAMANHO_CODIGO
    assert set(codigo) <= set(ALFABETO)
    assert agendamento['status'] == 'agendado'
    assert agendamento['duracao'] == 60
    assert agendamento['hora'] == '10:30'


def test_create_snapshots_patient(client, auth_headers):
    paciente = create_paciente(client, auth_headers)
    agendamento = create_agendamento(client, auth_headers, pacienteId=paciente['id'])
    assert agendamento['pacienteId'] == paciente['id']
    assert agendamento['paciente_nome'] == 'João da Silva'
    assert agendamento['paciente_telefone'] == '11999990000'

    # Renaming the patient later does not rewrite the appointment
    client.put(f"/api/pacientes/{paciente['id']}", json={'nome': 'João Silva Santos'}, headers=auth_headers)
    stored = client.get(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).get_json()['agendamento']
    assert stored['paciente_nome'] == 'João da Silva'


def test_create_validation(client, auth_headers):
    assert client.post('/api/agendamentos', json={'data': '2030-05-10'}, headers=auth_headers).status_code == 400
    assert client.post('/api/agendamentos', json={'data': '10/05/2030', 'horario': '10:00'}, headers=auth_headers).status_code == 400
    assert client.post('/api/agendamentos', json={'data': '2030-05-10', 'horario': '25:00'}, headers=auth_headers).status_code == 400
    assert client.post('/api/agendamentos', json={'data': '2030-05-10', 'horario': '10:00', 'pacienteId': 999}, headers=auth_headers).status_code == 404


def test_horario_with_seconds_is_truncated(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers, horario='09:15:00')
    assert agendamento['hora'] == '09:15'


def test_list_by_day_is_ordered(client, auth_headers):
    create_agendamento(client, auth_headers, horario='14:00')
    create_agendamento(client, auth_headers, horario='08:00')
    create_agendamento(client, auth_headers, data='2030-05-11', horario='07:00')

    response = client.get('/api/agendamentos?data=2030-05-10', headers=auth_headers)
    horas = [a['hora'] for a in response.get_json()['agendamentos']]
    assert horas == ['08:00', '14:00']


def test_list_by_range(client, auth_headers):
    create_agendamento(client, auth_headers, data='2030-05-09')
    create_agendamento(client, auth_headers, data='2030-05-10')
    create_agendamento(client, auth_headers, data='2030-05-12')

    response = client.get('/api/agendamentos?inicio=2030-05-10&fim=2030-05-12', headers=auth_headers)
    datas = [a['data'] for a in response.get_json()['agendamentos']]
    assert datas == ['2030-05-10', '2030-05-12']


def test_list_by_professional(client, auth_headers):
    profissional = client.post('/api/dentistas', json={'nome': 'Dr. Carlos'}, headers=auth_headers).get_json()['dentista']
    create_agendamento(client, auth_headers, profissional_id=profissional['id'])
    create_agendamento(client, auth_headers)

    response = client.get(f"/api/agendamentos?profissional_id={profissional['id']}", headers=auth_headers)
    agendamentos = response.get_json()['agendamentos']
    assert len(agendamentos) == 1
    assert agendamentos[0]['profissional_id'] == profissional['id']


def test_pending_requires_window(client, auth_headers):
    assert client.get('/api/agendamentos/pendentes', headers=auth_headers).status_code == 400


def test_pending_lists_only_unconfirmed(client, auth_headers):
    pendente = create_agendamento(client, auth_headers)
    confirmado = create_agendamento(client, auth_headers, horario='11:00')
    client.put(f"/api/agendamentos/{confirmado['id']}", json={'status': 'confirmado'}, headers=auth_headers)

    response = client.get('/api/agendamentos/pendentes?inicio=2030-05-01&fim=2030-05-31', headers=auth_headers)
    agendamentos = response.get_json()['agendamentos']
    assert [a['id'] for a in agendamentos] == [pendente['id']]
    assert agendamentos[0]['profissional_nome'] == 'Profissional'


def test_update_is_partial(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers, observacoes='Primeira consulta')
    response = client.put(f"/api/agendamentos/{agendamento['id']}", json={'horario': '16:00', 'valor': '150.50'}, headers=auth_headers)
    assert response.status_code == 200
    atualizado = response.get_json()['agendamento']
    assert atualizado['hora'] == '16:00'
    assert atualizado['valor'] == 150.5
    assert atualizado['observacoes'] == 'Primeira consulta'
    assert atualizado['codigoConfirmacao'] == agendamento['codigoConfirmacao']


def test_delete_is_hard(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers)
    assert client.delete(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).status_code == 404


def test_public_lookup_by_code(client, auth_headers):
    client.put('/api/config-clinica', json={'nome_clinica': 'Sorriso Feliz', 'telefone': '1133334444'}, headers=auth_headers)
    agendamento = create_agendamento(client, auth_headers, pacienteNome='Maria')

    response = client.get(f"/api/agendamentos/buscar-codigo/{agendamento['codigoConfirmacao'].lower()}")
    assert response.status_code == 200
    view = response.get_json()['agendamento']
    assert view == {
        'pacienteNome': 'Maria',
        'data': '2030-05-10',
        'horario': '10:30',
        'procedimento': 'Limpeza',
        'status': 'agendado',
        'dentistaNome': 'Dra. Ana',
        'clinicaNome': 'Sorriso Feliz',
        'clinicaTelefone': '1133334444',
    }


def test_public_lookup_errors(client):
    assert client.get('/api/agendamentos/buscar-codigo/ABC').status_code == 400
    assert client.get('/api/agendamentos/buscar-codigo/ZZZZZZ').status_code == 404


def test_public_confirm_is_idempotent(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers)
    codigo = agendamento['codigoConfirmacao']

    first = client.post('/api/agendamentos/confirmar', json={'codigo': codigo, 'acao': 'confirmar'})
    assert first.status_code == 200
    assert first.get_json()['agendamento']['status'] == 'confirmado'
    stamped = client.get(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).get_json()['agendamento']

    second = client.post('/api/agendamentos/confirmar', json={'codigo': codigo, 'acao': 'confirmar'})
    assert second.status_code == 200
    assert second.get_json()['success'] is True
    again = client.get(f"/api/agendamentos/{agendamento['id']}", headers=auth_headers).get_json()['agendamento']
    assert again['status'] == 'confirmado'
    assert again['atualizadoEm'] == stamped['atualizadoEm']


def test_public_cancel(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers)
    response = client.post('/api/agendamentos/confirmar', json={'codigo': agendamento['codigoConfirmacao'], 'acao': 'cancelar'})
    assert response.status_code == 200
    assert response.get_json()['agendamento']['status'] == 'cancelado'


def test_public_confirm_validation(client, auth_headers):
    agendamento = create_agendamento(client, auth_headers)
    assert client.post('/api/agendamentos/confirmar', json={'codigo': 'ABC', 'acao': 'confirmar'}).status_code == 400
    assert client.post('/api/agendamentos/confirmar', json={'codigo': agendamento['codigoConfirmacao'], 'acao': 'remarcar'}).status_code == 400
    assert client.post('/api/agendamentos/confirmar', json={'codigo': 'ZZZZZZ', 'acao': 'confirmar'}).status_code == 404


def test_public_confirm_is_audited(client, app, auth_headers):
    from odonto.models import AuditLog

    agendamento = create_agendamento(client, auth_headers)
    client.post('/api/agendamentos/confirmar', json={'codigo': agendamento['codigoConfirmacao'], 'acao': 'confirmar'})

    with app.app_context():
        entry = AuditLog.query.filter_by(entity_type='agendamento', action='confirm').first()
        assert entry is not None
        assert entry.entity_id == agendamento['id']


def test_message_phone_list_requires_window(client, auth_headers):
    response = client.get('/api/agendamentos/recados?inicio=2030-05-01', headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['erro'] == 'Período obrigatório'


def test_message_phone_list(client, auth_headers):
    com_recado = create_paciente(client, auth_headers, nome='Maria Souza', tel_recados='1133334444', nome_recado='Filha Ana')
    sem_recado = create_paciente(client, auth_headers, nome='Pedro Lima', cpf='987.654.321-00')
    profissional = client.post('/api/dentistas', json={'nome': 'Dr. Carlos'}, headers=auth_headers).get_json()['dentista']

    create_agendamento(client, auth_headers, pacienteId=com_recado['id'], data='2030-05-12', horario='14:00')
    create_agendamento(client, auth_headers, pacienteId=com_recado['id'], data='2030-05-11', horario='09:00',
                       profissional_id=profissional['id'])
    create_agendamento(client, auth_headers, pacienteId=sem_recado['id'], data='2030-05-11', horario='08:00')
    create_agendamento(client, auth_headers, pacienteId=com_recado['id'], data='2030-06-20', horario='08:00')

    response = client.get('/api/agendamentos/recados?inicio=2030-05-01&fim=2030-05-31', headers=auth_headers)
    assert response.status_code == 200
    recados = response.get_json()['agendamentos']
    assert [(r['data'], r['hora']) for r in recados] == [('2030-05-11', '09:00'), ('2030-05-12', '14:00')]
    assert recados[0]['paciente_nome'] == 'Maria Souza'
    assert recados[0]['tel_recados'] == '1133334444'
    assert recados[0]['nome_recado'] == 'Filha Ana'
    assert recados[0]['profissional_nome'] == 'Dr. Carlos'
    assert recados[1]['profissional_nome'] == 'Profissional'

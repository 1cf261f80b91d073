from flask import Blueprint, jsonify
from flask_jwt_extended import create_access_token
from odonto.models import Dentista
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, campo_nao_texto, empty_to_none
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

SENHA_MINIMA = 6
LOGIN_INVALIDO = 'Email ou senha incorretos'
TEXTO_CAMPOS = ('name', 'cro', 'email', 'password', 'clinic', 'specialty', 'phone')


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a practice account. Body: name, cro, email, password, clinic?, specialty?, phone?"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    nome = (data.get('name') or '').strip()
    cro = (data.get('cro') or '').strip()
    email = (data.get('email') or '').strip().lower()
    senha = data.get('password') or ''

    if not nome or not cro or not email or not senha:
        return jsonify({
            'success': False,
            'erro': 'Campos obrigatórios faltando'
        }), 400

    if len(senha) < SENHA_MINIMA:
        return jsonify({
            'success': False,
            'erro': f'Senha deve ter no mínimo {SENHA_MINIMA} caracteres'
        }), 400

    # Emails are stored lower-cased, so an equality check is case-insensitive
    if Dentista.query.filter_by(email=email).first():
        return jsonify({
            'success': False,
            'erro': 'Email já cadastrado'
        }), 400

    try:
        dentista = Dentista(
            nome=nome,
            cro=cro,
            email=email,
            clinica=empty_to_none(data.get('clinic')),
            especialidade=empty_to_none(data.get('specialty')),
            telefone=empty_to_none(data.get('phone')),
            ativo=True
        )
        dentista.set_senha(senha)

        db.session.add(dentista)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Register failed for %s: %s", email, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao cadastrar'
        }), 500

    logger.info("Account %s registered", dentista.id)
    log_audit('dentista', 'create', dentista_id=dentista.id, entity_id=dentista.id)

    return jsonify({
        'success': True,
        'message': 'Cadastro realizado!',
        'dentista': dentista.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate and return a bearer token valid for 7 days"""
    data = json_body() or {}
    if campo_nao_texto(data, ('email', 'password')):
        return jsonify({
            'success': False,
            'erro': 'Email e senha obrigatórios'
        }), 400

    email = (data.get('email') or '').strip().lower()
    senha = data.get('password') or ''

    if not email or not senha:
        return jsonify({
            'success': False,
            'erro': 'Email e senha obrigatórios'
        }), 400

    dentista = Dentista.query.filter_by(email=email).first()

    # Same answer for unknown email and wrong password
    if not dentista or not dentista.check_senha(senha):
        return jsonify({
            'success': False,
            'erro': LOGIN_INVALIDO
        }), 401

    if not dentista.ativo:
        return jsonify({
            'success': False,
            'erro': 'Conta desativada'
        }), 403

    try:
        dentista.ultimo_login = datetime.utcnow()
        dentista.total_logins = (dentista.total_logins or 0) + 1
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Login bookkeeping failed for %s: %s", dentista.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro interno'
        }), 500

    # Identity must be a string for the "sub" claim
    token = create_access_token(
        identity=str(dentista.id),
        additional_claims={
            'email': dentista.email,
            'nome': dentista.nome,
        }
    )

    return jsonify({
        'success': True,
        'message': 'Login realizado!',
        'token': token,
        'dentista': dentista.to_dict()
    }), 200


@auth_bp.route('/verify', methods=['GET'])
@tenant_required
def verify(tenant):
    """Validate the bearer token and return the account"""
    return jsonify({
        'success': True,
        'dentista': tenant.dentista.to_dict()
    }), 200


@auth_bp.route('/perfil', methods=['PUT'])
@tenant_required
def update_profile(tenant):
    """Edit profile fields. Email and password are not changed here."""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    dentista = tenant.dentista
    campos = {
        'name': 'nome',
        'cro': 'cro',
        'clinic': 'clinica',
        'specialty': 'especialidade',
        'phone': 'telefone',
    }

    for chave in ('name', 'cro'):
        if chave in data and not (data.get(chave) or '').strip():
            return jsonify({
                'success': False,
                'erro': f'Campo "{chave}" não pode ficar vazio'
            }), 400

    try:
        for chave, coluna in campos.items():
            if chave in data:
                setattr(dentista, coluna, empty_to_none(data.get(chave)))
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Profile update failed for %s: %s", dentista.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao atualizar perfil'
        }), 500

    log_audit('dentista', 'update', dentista_id=dentista.id, entity_id=dentista.id, details={'campos': sorted(k for k in data if k in campos)})

    return jsonify({
        'success': True,
        'message': 'Perfil atualizado!',
        'dentista': dentista.to_dict()
    }), 200

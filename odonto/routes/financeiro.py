from flask import Blueprint, request, jsonify
from odonto.models import Movimentacao, Paciente
from odonto.models.financeiro import TIPOS_MOVIMENTACAO
from odonto.extensions import db
from odonto.utils import (
    tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_date, parse_valor, empty_to_none
)
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)

financeiro_bp = Blueprint('financeiro', __name__, url_prefix='/api/financeiro')

TEXTO_CAMPOS = ('tipo', 'descricao', 'status', 'formaPagamento', 'observacoes')


@financeiro_bp.route('', methods=['GET'])
@tenant_required
def list_movimentacoes(tenant):
    """
    Ledger entries, newest first, with a revenue/expense summary of the filtered set.
    Query params: inicio, fim (YYYY-MM-DD), tipo
    """
    query = tenant.query(Movimentacao)

    inicio = request.args.get('inicio', type=str)
    fim = request.args.get('fim', type=str)
    if inicio and fim:
        data_inicio, data_fim = parse_date(inicio), parse_date(fim)
        if not data_inicio or not data_fim:
            return jsonify({
                'success': False,
                'erro': 'Período inválido. Use AAAA-MM-DD'
            }), 400
        query = query.filter(Movimentacao.data >= data_inicio, Movimentacao.data <= data_fim)

    tipo = request.args.get('tipo', type=str)
    if tipo:
        query = query.filter(Movimentacao.tipo == tipo)

    try:
        movimentacoes = query.order_by(Movimentacao.data.desc(), Movimentacao.id.desc()).all()
    except Exception as e:
        logger.error("List ledger failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar movimentações'
        }), 500

    receitas = sum((m.valor or Decimal('0') for m in movimentacoes if m.tipo == 'receita'), Decimal('0'))
    despesas = sum((m.valor or Decimal('0') for m in movimentacoes if m.tipo == 'despesa'), Decimal('0'))

    return jsonify({
        'success': True,
        'movimentacoes': [m.to_dict() for m in movimentacoes],
        'total': len(movimentacoes),
        'resumo': {
            'receitas': float(receitas),
            'despesas': float(despesas),
            'saldo': float(receitas - despesas),
        }
    }), 200


@financeiro_bp.route('', methods=['POST'])
@tenant_required
def create_movimentacao(tenant):
    """Record revenue or expense"""
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

    tipo = data.get('tipo')
    descricao = empty_to_none(data.get('descricao'))
    if not tipo or not descricao or data.get('valor') in (None, '') or not data.get('data'):
        return jsonify({
            'success': False,
            'erro': 'Tipo, descrição, valor e data obrigatórios'
        }), 400

    if tipo not in TIPOS_MOVIMENTACAO:
        return jsonify({
            'success': False,
            'erro': 'Tipo deve ser receita ou despesa'
        }), 400

    valor = parse_valor(data.get('valor'))
    if valor is None:
        return jsonify({
            'success': False,
            'erro': 'Valor inválido'
        }), 400

    dia = parse_date(data.get('data'))
    if not dia:
        return jsonify({
            'success': False,
            'erro': 'Data inválida. Use AAAA-MM-DD'
        }), 400

    try:
        parcelas = int(data.get('parcelas') or 1)
    except (TypeError, ValueError):
        parcelas = 0
    if parcelas < 1:
        return jsonify({
            'success': False,
            'erro': 'Parcelas inválidas'
        }), 400

    paciente_id = None
    if empty_to_none(data.get('pacienteId')) is not None:
        paciente = tenant.get(Paciente, validar_id(data.get('pacienteId')))
        if not paciente:
            return jsonify({
                'success': False,
                'erro': 'Paciente não encontrado'
            }), 404
        paciente_id = paciente.id

    try:
        movimentacao = Movimentacao(
            tipo=tipo,
            descricao=descricao.strip(),
            valor=valor,
            data=dia,
            status=empty_to_none(data.get('status')) or 'pendente',
            forma_pagamento=empty_to_none(data.get('formaPagamento')),
            parcelas=parcelas,
            paciente_id=paciente_id,
            observacoes=empty_to_none(data.get('observacoes'))
        )
        tenant.add(movimentacao)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create ledger entry failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao registrar movimentação'
        }), 500

    log_audit('financeiro', 'create', dentista_id=tenant.dentista_id, entity_id=movimentacao.id,
              details={'tipo': tipo, 'valor': float(valor)})

    return jsonify({
        'success': True,
        'message': 'Movimentação registrada!',
        'movimentacao': movimentacao.to_dict()
    }), 201


@financeiro_bp.route('/<movimentacao_id>', methods=['PUT'])
@tenant_required
def update_movimentacao(movimentacao_id, tenant):
    """Change the settlement status (and payment method when given)"""
    record_id = validar_id(movimentacao_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    movimentacao = tenant.get(Movimentacao, record_id)
    if not movimentacao:
        return jsonify({
            'success': False,
            'erro': 'Movimentação não encontrada'
        }), 404

    data = json_body() or {}
    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    status = empty_to_none(data.get('status'))
    if not status:
        return jsonify({
            'success': False,
            'erro': 'Status obrigatório'
        }), 400

    try:
        movimentacao.status = status.strip()
        if 'formaPagamento' in data:
            movimentacao.forma_pagamento = empty_to_none(data.get('formaPagamento'))
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Update ledger entry %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao atualizar movimentação'
        }), 500

    log_audit('financeiro', 'update', dentista_id=tenant.dentista_id, entity_id=record_id, details={'status': movimentacao.status})

    return jsonify({
        'success': True,
        'message': 'Movimentação atualizada!',
        'movimentacao': movimentacao.to_dict()
    }), 200


@financeiro_bp.route('/<movimentacao_id>', methods=['DELETE'])
@tenant_required
def delete_movimentacao(movimentacao_id, tenant):
    record_id = validar_id(movimentacao_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    movimentacao = tenant.get(Movimentacao, record_id)
    if not movimentacao:
        return jsonify({
            'success': False,
            'erro': 'Movimentação não encontrada'
        }), 404

    try:
        db.session.delete(movimentacao)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete ledger entry %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover movimentação'
        }), 500

    log_audit('financeiro', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Movimentação removida!'
    }), 200

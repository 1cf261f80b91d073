from flask import Blueprint, jsonify
from odonto.models import NotaFiscal, Paciente
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_valor, empty_to_none
from datetime import date
import logging

logger = logging.getLogger(__name__)

notas_bp = Blueprint('notas', __name__, url_prefix='/api/notas')

TEXTO_CAMPOS = ('descricaoServico',)


@notas_bp.route('', methods=['GET'])
@tenant_required
def list_notas(tenant):
    """Issued invoices, newest first"""
    try:
        notas = (
            tenant.query(NotaFiscal)
            .order_by(NotaFiscal.criado_em.desc(), NotaFiscal.id.desc())
            .all()
        )
    except Exception as e:
        logger.error("List invoices failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar notas'
        }), 500

    return jsonify({
        'success': True,
        'notas': [n.to_dict() for n in notas],
        'total': len(notas)
    }), 200


@notas_bp.route('', methods=['POST'])
@tenant_required
def create_nota(tenant):
    """
    Issue an invoice. Body: valor, pacienteId?, descricaoServico?
    A linked patient must have a complete registration.
    """
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

    valor = parse_valor(data.get('valor'))
    if valor is None:
        return jsonify({
            'success': False,
            'erro': 'Valor obrigatório'
        }), 400

    paciente = None
    if empty_to_none(data.get('pacienteId')) is not None:
        paciente = tenant.get(Paciente, validar_id(data.get('pacienteId')))
        if not paciente:
            return jsonify({
                'success': False,
                'erro': 'Paciente não encontrado'
            }), 404

        paciente.atualizar_derivados()
        if not paciente.cadastro_completo:
            faltando = []
            if paciente.estrangeiro:
                if not paciente.passaporte:
                    faltando.append('passaporte')
            elif not paciente.cpf:
                faltando.append('cpf')
            if not paciente.cep:
                faltando.append('cep')
            db.session.rollback()
            return jsonify({
                'success': False,
                'erro': 'Cadastro do paciente incompleto para emissão de nota',
                'cadastroIncompleto': True,
                'camposFaltando': faltando
            }), 400

    try:
        sequencia = tenant.query(NotaFiscal).count() + 1
        nota = NotaFiscal(
            numero=NotaFiscal.formatar_numero(sequencia),
            valor=valor,
            data_emissao=date.today(),
            descricao_servico=empty_to_none(data.get('descricaoServico')),
            status='emitida',
            paciente_id=paciente.id if paciente else None
        )
        tenant.add(nota)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Issue invoice failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao emitir nota'
        }), 500

    log_audit('nota_fiscal', 'create', dentista_id=tenant.dentista_id, entity_id=nota.id, details={'numero': nota.numero})

    return jsonify({
        'success': True,
        'message': f'Nota {nota.numero} emitida!',
        'nota': nota.to_dict()
    }), 201

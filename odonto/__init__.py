from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate, bcrypt, jwt
import logging
import os

logger = logging.getLogger(__name__)

HTTP_MENSAGENS = {
    400: 'Requisição inválida',
    401: 'Não autorizado',
    403: 'Acesso negado',
    404: 'Endpoint não encontrado',
    405: 'Método não permitido',
    413: 'Requisição muito grande',
}


def _configure_logging(app):
    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if app.debug or app.testing:
        return

    from logging.handlers import RotatingFileHandler

    log_dir = app.config.get('LOG_DIR', 'logs')
    if not os.path.exists(log_dir):
        os.mkdir(log_dir)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=10240000,
        backupCount=10
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)
    logging.getLogger().addHandler(file_handler)
    app.logger.info('Application startup')


def _register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({
            'success': False,
            'erro': 'Token não fornecido'
        }), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({
            'success': False,
            'erro': 'Token inválido'
        }), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({
            'success': False,
            'erro': 'Sessão expirada. Faça login novamente.'
        }), 403


def _register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'erro': 'Endpoint não encontrado'
        }), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({
            'success': False,
            'erro': HTTP_MENSAGENS.get(error.code, 'Erro na requisição')
        }), error.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        logger.error("Unhandled exception: %s", e, exc_info=True)
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': 'Erro interno do servidor'
        }), 500


def create_app(config_name=None, test_config=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    from odonto.config import config, get_config, DEFAULT_JWT_SECRET
    if config_name:
        app.config.from_object(config.get(config_name, config['default']))
    else:
        app.config.from_object(get_config())
    if test_config:
        app.config.update(test_config)

    if not app.debug and not app.testing and app.config['JWT_SECRET_KEY'] == DEFAULT_JWT_SECRET:
        raise RuntimeError('JWT_SECRET must be set in production')

    _configure_logging(app)

    # Initialize extensions first (before error handlers)
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)
    _register_jwt_handlers()

    from odonto.utils.cors import init_cors
    init_cors(app)

    _register_error_handlers(app)

    from odonto.middleware import setup_middleware
    setup_middleware(app)

    with app.app_context():
        from . import models  # noqa: F401  registers tables with SQLAlchemy

        from .routes import (
            auth_bp, pacientes_bp, agendamentos_bp, prontuarios_bp, anamnese_bp, receitas_bp, atestados_bp,
            financeiro_bp, notas_bp, dentistas_bp, fila_encaixe_bp, config_clinica_bp, dashboard_bp, health_bp
        )
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(auth_bp)
        app.register_blueprint(pacientes_bp)
        app.register_blueprint(agendamentos_bp)
        app.register_blueprint(prontuarios_bp)
        app.register_blueprint(anamnese_bp)
        app.register_blueprint(receitas_bp)
        app.register_blueprint(atestados_bp)
        app.register_blueprint(financeiro_bp)
        app.register_blueprint(notas_bp)
        app.register_blueprint(dentistas_bp)
        app.register_blueprint(fila_encaixe_bp)
        app.register_blueprint(config_clinica_bp)
        app.register_blueprint(dashboard_bp)

        if app.config.get('AUTO_CREATE_TABLES'):
            try:
                db.create_all()
            except Exception as e:
                logger.error("Error creating tables: %s", e, exc_info=True)
                raise

    return app

import json
import logging
import traceback

from flask import Flask, jsonify, request
from dotenv import load_dotenv
from werkzeug.middleware.proxy_fix import ProxyFix

# Carrega variáveis de ambiente
load_dotenv()
from pharmacy_registry.config import config


# Configuração de Logs (JSON Estruturado para Cloud Logging)
class JsonFormatter(logging.Formatter):
    def format(self, record):
        json_log = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": self.formatTime(record, self.datefmt),
            "logger": record.name,
            "module": record.module,
        }
        if hasattr(record, "props"):
            json_log.update(record.props)

        if record.exc_info:
            json_log["exception"] = self.formatException(record.exc_info)

        return json.dumps(json_log, ensure_ascii=False)


def configure_logging(level=None):
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or config.LOG_LEVEL, handlers=[handler], force=True)


logger = logging.getLogger("pharmacy-registry")


def _traced_actor_id():
    """Actor of the current request for the trace; anonymous requests are traced too."""
    from flask_login import current_user
    try:
        return current_user.id if current_user.is_authenticated else None
    except Exception as e:
        logger.warning(f"⚠️ Rastro sem usuário (sessão não resolvida): {e.__class__.__name__}")
        return None


def create_app(overrides=None):
    """
    Build the Flask app: both database engines, operational schema,
    session loader, rate limiter, blueprints and the request trace hook.
    """
    overrides = overrides or {}
    configure_logging(overrides.get('LOG_LEVEL'))

    app = Flask(__name__)
    app.config['SECRET_KEY'] = config.SECRET_KEY
    app.config['RATELIMIT_ENABLED'] = config.RATELIMIT_ENABLED
    app.config['DATABASE_URL'] = config.DATABASE_URL
    app.config['REFERENCE_DATABASE_URL'] = config.REFERENCE_DATABASE_URL
    app.config['TRACE_ROUTES'] = config.TRACE_ROUTES
    app.config['TRACE_MAX_PENDING'] = config.TRACE_MAX_PENDING
    app.config['TRACE_SYNCHRONOUS'] = False
    app.config.update(overrides)

    # Load Balancer Fix: remote_addr passa a ser o IP real do cliente
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Inicializa Banco de Dados
    from pharmacy_registry import database
    try:
        database.init_db(app.config['DATABASE_URL'], app.config['REFERENCE_DATABASE_URL'])
        logger.info("✅ Banco de dados inicializado com sucesso")
    except Exception as e:
        logger.error(f"❌ Falha crítica na inicialização do Banco de Dados: {e}")
        raise

    # Rodar Migrações
    from pharmacy_registry.migration import run_migrations
    run_migrations(database.engine)

    # Rastro de requisições (best-effort, fora da transação)
    from pharmacy_registry.services.trace_recorder import TraceRecorder
    app.trace_recorder = TraceRecorder(
        database.db_session.session_factory if database.db_session else None,
        routes=app.config['TRACE_ROUTES'],
        max_pending=app.config['TRACE_MAX_PENDING'],
        synchronous=app.config['TRACE_SYNCHRONOUS'],
    )

    # Sessão (token Bearer) e limites de requisição
    from pharmacy_registry.auth import login_manager
    from pharmacy_registry.infrastructure.security.rate_limiter import init_limiter
    login_manager.init_app(app)
    init_limiter(app)

    # Registra Blueprints
    logger.info("🔧 Carregando Blueprints...")
    from pharmacy_registry.pharmacy_routes import pharmacy_bp
    from pharmacy_registry.registry_routes import registry_bp
    app.register_blueprint(pharmacy_bp)
    app.register_blueprint(registry_bp)
    logger.info("✅ Blueprints Registrados: pharmacies, registry")

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    @app.after_request
    def record_trace(response):
        recorder = app.trace_recorder
        if recorder is not None and request.method != 'GET' and recorder.should_trace(request.path):
            recorder.trace(request.method, request.path, _traced_actor_id(), request.remote_addr)
        return response

    @app.errorhandler(500)
    def handle_500(e):
        tb = traceback.format_exc()
        logger.error(f"💥 ERRO 500 DETECTADO: {e}\nTraceback:\n{tb}")
        return jsonify({'error': 'INTERNAL_ERROR', 'message': 'Erro Interno no Servidor', 'retryable': False}), 500

    from pharmacy_registry.container import teardown_uow
    app.teardown_appcontext(teardown_uow)

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        if database.db_session:
            database.db_session.remove()

    return app

# assessment_api/__init__.py

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from flask import Flask, jsonify
from flask.logging import default_handler
from flask_cors import CORS

# Configure logging to show INFO level messages. The Flask app logger and the
# module loggers of this package all share this logger, so bootstrap failures
# are reported the same way before any app exists.
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
_handler = logging.StreamHandler()
_handler.setLevel(logging.INFO)
_handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s: %(message)s'))
logger.addHandler(_handler)


def create_app(config, connection, setup_auth=None, register_routes=None):
    """
    Builds the request pipeline around an already-open MongoDB connection.

    Stages are attached in the order requests meet them: CORS, session,
    models, auth, the status endpoint, the route registry and finally the
    catch-all error handler. Flask parses JSON and url-encoded bodies on
    demand (request.get_json() / request.form), so body parsing needs no
    stage of its own.
    """
    from .auth import setup_auth as default_setup_auth
    from .errors import register_error_handlers
    from .models import register_models
    from .routes import register_routes as default_register_routes
    from .sessions import init_session

    setup_auth = setup_auth or default_setup_auth
    register_routes = register_routes or default_register_routes

    app = Flask(__name__)
    app.config.from_object(config)

    # app.logger is the package logger configured above
    app.logger.removeHandler(default_handler)

    app.extensions['mongo'] = connection

    # Any origin may call the API with credentials; flask-cors echoes the
    # request's Origin back since '*' is not allowed alongside credentials.
    CORS(app, origins='*', methods=config.CORS_METHODS, supports_credentials=True)

    init_session(app, connection, config)

    register_models(connection.database)
    setup_auth(app)

    @app.route('/api/status', methods=['GET'])
    def status():
        return jsonify({
            'status': 'ok',
            'mongoConnection': connection.state_label,
            'timestamp': datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        })

    # Registries may do asynchronous setup of their own
    result = register_routes(app)
    if inspect.isawaitable(result):
        asyncio.run(_await(result))

    register_error_handlers(app, config.is_production)

    return app


async def _await(awaitable):
    return await awaitable

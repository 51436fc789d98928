# assessment_api/serverless.py

import logging

from flask import json
from werkzeug.wrappers import Response

from .errors import error_payload

logger = logging.getLogger(__name__)


class ServerlessHandler:
    """
    WSGI entry point handed to the serverless runtime.

    Answers CORS preflights directly, builds the pipeline on demand and
    forwards everything else to it. Failures that reach this level, including
    a failed setup, become a JSON 500 instead of crashing the invocation.
    """

    def __init__(self, bootstrapper):
        self.bootstrapper = bootstrapper

    @property
    def production(self):
        return self.bootstrapper.config.is_production

    def __call__(self, environ, start_response):
        # Preflights never need the database
        if environ.get('REQUEST_METHOD') == 'OPTIONS':
            return Response(status=200)(environ, start_response)

        try:
            app = self.bootstrapper.ensure_ready()
            return app(environ, start_response)
        except Exception as e:
            logger.error(f"Serverless function error: {e}", exc_info=True)
            response = Response(
                json.dumps(error_payload(e, self.production)),
                status=500,
                mimetype='application/json',
            )
            return response(environ, start_response)

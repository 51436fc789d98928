# assessment_api/errors.py
"""
Error types raised while building the request pipeline, and the terminal
error stage that turns unhandled failures into JSON 500 responses.
"""

import traceback

from flask import jsonify
from werkzeug.exceptions import HTTPException

GENERIC_ERROR = 'Internal Server Error'


class ConfigurationError(Exception):
    """A required configuration value is missing"""
    def __init__(self, message, status_code=500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConnectivityError(Exception):
    """The database could not be reached within the configured timeouts"""
    def __init__(self, message, status_code=500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def error_payload(error, production):
    """
    Builds the JSON body for a 500 response.

    Outside production the error text and its traceback are included to help
    debugging; in production only the generic message is returned.

    Args:
        error (BaseException): The failure being reported
        production (bool): Whether details must be withheld

    Returns:
        dict: JSON-serialisable response body
    """
    payload = {'error': GENERIC_ERROR}

    if not production:
        payload['message'] = str(error)
        payload['stack'] = ''.join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )

    return payload


def register_error_handlers(app, production):
    """Attaches the terminal error stage to the app."""

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Routing errors (404, 405, ...) keep their own status codes.
        if isinstance(error, HTTPException):
            return error

        app.logger.error('API Error: %s', error, exc_info=error)
        return jsonify(error_payload(error, production)), 500

    return handle_unexpected_error

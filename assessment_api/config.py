# config.py

import os
from datetime import timedelta
from dotenv import load_dotenv

from .errors import ConfigurationError

# Get the base directory of the application
basedir = os.path.abspath(os.path.dirname(__file__))

# Pick up a local .env file from the repository root (no-op on Vercel).
load_dotenv(os.path.join(basedir, '..', '.env'))


class Config:
    """
    Runtime configuration for the serverless host.

    Values that vary per deployment are read from the environment when the
    object is built; everything else is fixed here. An explicit mapping can
    be passed instead of os.environ, which is how the tests inject settings.
    """
    # --- Database Settings ---
    DEFAULT_DB_NAME = 'assessment'
    SERVER_SELECTION_TIMEOUT_MS = 5000
    SOCKET_TIMEOUT_MS = 45000

    # --- Session Settings ---
    DEFAULT_SESSION_SECRET = 'assessment-api-development-secret'
    # Any Flask-Session backend name; only 'mongodb' reuses the app's client
    SESSION_TYPE = 'mongodb'
    SESSION_COLLECTION = 'sessions'
    SESSION_LIFETIME = timedelta(days=1)

    # --- Cross-Origin Settings ---
    CORS_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']

    def __init__(self, environ=None):
        if environ is None:
            environ = os.environ

        # Connection string for MongoDB. Only checked when the pipeline is
        # built, so importing the entry point never fails.
        self.MONGO_URI = environ.get('MONGO_DB')
        self.MONGO_DB_NAME = environ.get('MONGO_DB_NAME') or self.DEFAULT_DB_NAME

        # --- Secret Key ---
        self.SECRET_KEY = environ.get('SESSION_SECRET') or self.DEFAULT_SESSION_SECRET

        # APP_ENV wins; VERCEL_ENV is what the platform sets on deployments.
        self.ENVIRONMENT = (
            environ.get('APP_ENV') or environ.get('VERCEL_ENV') or 'development'
        ).lower()

    @property
    def is_production(self):
        return self.ENVIRONMENT == 'production'

    def require_mongo_uri(self):
        """Returns the MongoDB connection string or raises ConfigurationError."""
        if not self.MONGO_URI:
            raise ConfigurationError('MONGO_DB environment variable not set')
        return self.MONGO_URI

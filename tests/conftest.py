"""
Test fixtures for the assessment API host.
"""

import mongomock
import pytest
from cachelib import SimpleCache
from werkzeug.security import generate_password_hash
from werkzeug.test import Client

from assessment_api.bootstrap import PipelineBootstrapper
from assessment_api.config import Config
from assessment_api.database import MongoConnection
from assessment_api.serverless import ServerlessHandler

TEST_MONGO_URI = 'mongodb://localhost:27017/assessment_test'


class TestConfig(Config):
    """Config with sessions kept in memory instead of MongoDB."""
    __test__ = False

    SESSION_TYPE = 'cachelib'

    def __init__(self, environ=None):
        super().__init__(environ if environ is not None else {})
        self.SESSION_CACHELIB = SimpleCache()


class MongoClientFactory:
    """Hands out in-memory clients and records how it was called."""

    def __init__(self):
        self.calls = []
        self.clients = []

    def __call__(self, uri, **kwargs):
        self.calls.append((uri, kwargs))
        client = mongomock.MongoClient(uri)
        self.clients.append(client)
        return client


@pytest.fixture
def environ():
    return {'MONGO_DB': TEST_MONGO_URI, 'SESSION_SECRET': 'test-secret'}


@pytest.fixture
def config(environ):
    return TestConfig(environ)


@pytest.fixture
def production_config(environ):
    return TestConfig({**environ, 'APP_ENV': 'production'})


@pytest.fixture
def client_factory():
    return MongoClientFactory()


@pytest.fixture
def connection(client_factory):
    return MongoConnection(client_factory=client_factory)


@pytest.fixture
def bootstrapper(config, connection):
    return PipelineBootstrapper(config, connection=connection)


@pytest.fixture
def app(bootstrapper):
    """The Flask pipeline, built through the bootstrapper."""
    flask_app = bootstrapper.ensure_ready()
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def handler(bootstrapper):
    return ServerlessHandler(bootstrapper)


@pytest.fixture
def handler_client(handler):
    """A client speaking to the serverless entry point rather than Flask directly."""
    return Client(handler)


@pytest.fixture
def sample_user(app, connection):
    document = {
        'username': 'ada',
        'email': 'ada@example.org',
        'password_hash': generate_password_hash('correct-horse'),
        'role': 'STUDENT',
    }
    result = connection.database['users'].insert_one(document)
    return {**document, '_id': result.inserted_id, 'password': 'correct-horse'}

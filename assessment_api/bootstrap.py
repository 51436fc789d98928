# assessment_api/bootstrap.py
"""
Lazy, once-only construction of the request pipeline.

Serverless runtimes reuse a warm process across invocations, so the Flask app
and its MongoDB client are built on the first request and kept for the rest
of the process lifetime. A failed attempt leaves nothing cached and the next
request starts over.
"""

import logging
import threading

from . import create_app
from .database import MongoConnection

logger = logging.getLogger(__name__)


class PipelineBootstrapper:
    """
    Owns the cached Flask app and the flag that guards it.

    Invariant: `app` is not None if and only if `is_setup` is True. The flag
    only ever goes from False to True.

    Args:
        config (Config): Runtime configuration
        connection (MongoConnection): Shared database connection
        setup_auth (callable): Mounts authentication on the app
        register_routes (callable): Registers application routes; may return
            an awaitable
    """

    def __init__(self, config, connection=None, setup_auth=None, register_routes=None):
        self.config = config
        self.connection = connection or MongoConnection()
        self.setup_auth = setup_auth
        self.register_routes = register_routes
        self.app = None
        self.is_setup = False
        self._lock = threading.Lock()

    def ensure_ready(self):
        """
        Returns the request pipeline, building it on first use.

        Raises:
            ConfigurationError: MONGO_DB is not set
            ConnectivityError: MongoDB did not answer within the timeouts
        """
        if self.is_setup:
            return self.app

        # Threaded WSGI servers can deliver the first requests concurrently;
        # only one of them builds the pipeline.
        with self._lock:
            if self.is_setup:
                return self.app

            try:
                app = self._build()
            except Exception as e:
                logger.error(f"Failed to set up application: {e}", exc_info=True)
                raise

            self.app = app
            self.is_setup = True
            return app

    def _build(self):
        uri = self.config.require_mongo_uri()

        self.connection.connect(
            uri,
            default_db=self.config.MONGO_DB_NAME,
            server_selection_timeout_ms=self.config.SERVER_SELECTION_TIMEOUT_MS,
            socket_timeout_ms=self.config.SOCKET_TIMEOUT_MS,
        )

        return create_app(
            self.config,
            self.connection,
            setup_auth=self.setup_auth,
            register_routes=self.register_routes,
        )

# assessment_api/database.py
"""
MongoDB connection management.

A single MongoConnection is owned by the bootstrapper and shared with the
Flask app through app.extensions['mongo']. connect() is idempotent: once the
connection is up, further calls are no-ops. A client left over from a
connection that has since dropped is closed before a new one is opened.
"""

import enum
import logging

from flask import current_app
from pymongo import MongoClient, monitoring
from pymongo.errors import PyMongoError

from .errors import ConnectivityError

logger = logging.getLogger(__name__)


class ConnectionState(enum.IntEnum):
    """Ready states, numbered the way MongoDB drivers conventionally report them."""
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3


class _TopologyListener(monitoring.TopologyListener):
    """
    Keeps the connection state in step with the driver's view of the cluster.

    A replica set member going down does not matter while a primary is still
    writable, so the state follows the whole topology rather than single
    server heartbeats.
    """

    def __init__(self, connection):
        self.connection = connection

    def opened(self, event):
        pass

    def description_changed(self, event):
        self.connection._on_topology_change(self, event.new_description.has_writable_server())

    def closed(self, event):
        pass


class MongoConnection:
    """
    Process-wide handle on the MongoDB client.

    Args:
        client_factory (callable): Builds the client from a URI and keyword
            options. Defaults to pymongo.MongoClient; tests pass an in-memory
            client instead.
    """

    def __init__(self, client_factory=MongoClient):
        self.client_factory = client_factory
        self.state = ConnectionState.DISCONNECTED
        self.client = None
        self.database = None
        self._listener = None

    @property
    def is_connected(self):
        return self.state == ConnectionState.CONNECTED

    @property
    def state_label(self):
        return 'connected' if self.is_connected else 'disconnected'

    def connect(self, uri, default_db, server_selection_timeout_ms, socket_timeout_ms):
        """
        Opens the client and verifies the server is reachable.

        Returns:
            Database: The default database for this deployment

        Raises:
            ConnectivityError: If the server cannot be reached in time
        """
        if self.is_connected:
            return self.database

        # The driver may have lost the servers after setup; drop that client
        # so its monitors stop reporting into this object.
        if self.client is not None:
            self.close()

        self.state = ConnectionState.CONNECTING
        listener = _TopologyListener(self)
        self._listener = listener
        client = None
        try:
            client = self.client_factory(
                uri,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
                socketTimeoutMS=socket_timeout_ms,
                event_listeners=[listener],
            )
            # MongoClient connects lazily; ping forces server selection.
            client.admin.command('ping')
            database = client.get_default_database(default=default_db)
        except Exception as e:
            self.state = ConnectionState.DISCONNECTED
            if client is not None:
                client.close()
            if isinstance(e, PyMongoError):
                raise ConnectivityError(f"Could not connect to MongoDB: {e}") from e
            raise

        self.client = client
        self.database = database
        self.state = ConnectionState.CONNECTED
        logger.info(f"Connected to MongoDB (database '{database.name}')")
        return database

    def close(self):
        if self.client is None:
            self.state = ConnectionState.DISCONNECTED
            return

        self.state = ConnectionState.DISCONNECTING
        try:
            self.client.close()
        finally:
            self.client = None
            self.database = None
            self._listener = None
            self.state = ConnectionState.DISCONNECTED
            logger.info("Disconnected from MongoDB")

    def _on_topology_change(self, listener, available):
        # Events from a replaced client, or arriving mid-connect, are ignored
        if listener is not self._listener or self.client is None:
            return

        if available and self.state == ConnectionState.DISCONNECTED:
            logger.info("MongoDB primary available again")
            self.state = ConnectionState.CONNECTED
        elif not available and self.state == ConnectionState.CONNECTED:
            logger.warning("No writable MongoDB server; marking connection as disconnected")
            self.state = ConnectionState.DISCONNECTED


def get_db():
    """Returns the database bound to the current Flask app."""
    return current_app.extensions['mongo'].database

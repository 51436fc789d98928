# assessment_api/sessions.py

from flask_session import Session


def init_session(app, connection, config):
    """
    Stores sessions server-side, by default in MongoDB reusing the
    already-open client.

    Records live in the 'sessions' collection and expire after one day via
    the TTL index Flask-Session creates on their expiration field. The cookie
    carries only the session id.

    The id is 32 random bytes from secrets.token_urlsafe and is left unsigned:
    it cannot be guessed, and the data it points to never leaves the server.
    SESSION_SECRET (SECRET_KEY) still keys Flask-Login's remember-me cookie
    and anything else the app signs with itsdangerous.
    """
    app.config.update(
        SESSION_TYPE=config.SESSION_TYPE,
        SESSION_PERMANENT=True,
        PERMANENT_SESSION_LIFETIME=config.SESSION_LIFETIME,
        # Only write back when the session actually changed
        SESSION_REFRESH_EACH_REQUEST=False,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        SESSION_COOKIE_SECURE=config.is_production,
    )

    if config.SESSION_TYPE == 'mongodb':
        app.config.update(
            SESSION_MONGODB=connection.client,
            SESSION_MONGODB_DB=connection.database.name,
            SESSION_MONGODB_COLLECT=config.SESSION_COLLECTION,
        )

    Session(app)

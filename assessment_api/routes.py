# assessment_api/routes.py
"""
Default route registry.

Any callable taking the app can stand in for register_routes; the
bootstrapper awaits its result when it returns an awaitable, so a registry
that needs asynchronous setup can be an `async def`.
"""


def register_routes(app):
    # Register them all under the '/api' prefix
    from .auth import bp as auth_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')

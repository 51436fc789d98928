from werkzeug.serving import run_simple

from api.index import app

# This is the entry point for local development.
# It serves the same handler Vercel uses, so the pipeline is still built on the first request.

if __name__ == '__main__':
    # 'use_reloader' gives hot-reloading when you save changes.
    run_simple('127.0.0.1', 5000, app, use_reloader=True, use_debugger=True)

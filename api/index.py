"""
Vercel Serverless Entry Point

This file serves as the bridge between Vercel's serverless runtime and the Flask application.
vercel.json rewrites every path to this function.

Architecture:
- Vercel imports this module once per cold start and calls `app` for every request
- `app` answers CORS preflights itself and builds the Flask pipeline on the first
  real request (MongoDB connection, sessions, auth, routes)
- Warm invocations reuse the pipeline built by the first one
"""

from assessment_api.bootstrap import PipelineBootstrapper
from assessment_api.config import Config
from assessment_api.serverless import ServerlessHandler

# Nothing here touches the network; setup happens on the first request
app = ServerlessHandler(PipelineBootstrapper(Config()))

# The name 'app' is detected automatically by @vercel/python

"""
WSGI entrypoint: expose the Flask application as `app`.
"""

from .flask_main import create_app

app = create_app()

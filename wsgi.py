"""
WSGI entry point for production deployment
Used by Gunicorn, uWSGI, and other WSGI servers
"""
from siddha_savor import create_app

# Create Flask app instance
application = app = create_app()

import logging
from functools import wraps

from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from sqlalchemy.exc import SQLAlchemyError

from siddha_savor.extensions import db
from siddha_savor.exceptions import SavorError, UpstreamError

logger = logging.getLogger(__name__)


def current_identity():
    """Returns (role, user_id, claims) from the verified JWT."""
    claims = get_jwt()
    return claims.get("role"), int(get_jwt_identity()), claims


def require_role(*roles):
    """
    Decorator to require specific roles
    Usage: @require_role('doctor', 'admin')
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            """
            Verify the access token and require that its role claim is one
            of the given roles.
            """
            try:
                verify_jwt_in_request()
                role = get_jwt().get("role")
            except Exception:
                return jsonify({
                    'success': False,
                    'error': 'Authentication required'
                }), 401

            if role not in roles:
                return jsonify({
                    'success': False,
                    'error': f'Permission denied. Required roles: {", ".join(roles)}'
                }), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_cron_secret(f):
    """Require 'Authorization: Bearer <CRON_SECRET>' when a secret is configured."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        secret = current_app.config.get('CRON_SECRET')
        if secret and request.headers.get('Authorization') != f'Bearer {secret}':
            return jsonify({
                'success': False,
                'error': 'Authentication required'
            }), 401
        return f(*args, **kwargs)
    return decorated_function


def handle_errors(operation):
    """
    Route boundary: domain errors pass through to the app error handler,
    database failures are rolled back and reported as UpstreamError, and
    anything else is logged with the operation name before re-raising.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except SavorError:
                raise
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Database error in {operation} {kwargs or ''}: {e}", exc_info=True)
                raise UpstreamError() from e
            except Exception as e:
                db.session.rollback()
                logger.error(f"Unexpected error in {operation} {kwargs or ''}: {e}", exc_info=True)
                raise
        return decorated_function
    return decorator

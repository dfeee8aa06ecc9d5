"""
Password reset tokens: a URL token plus a 6-digit code, one-time use.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import and_, or_

from siddha_savor.extensions import db
from siddha_savor.exceptions import (
    CodeMismatchError,
    InvalidTokenError,
    NotFoundError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    ValidationError,
)
from siddha_savor.models import Admin, Doctor, Patient, PasswordReset
from siddha_savor.utils.audit import log_audit
from siddha_savor.utils.tokens import generate_reset_code, generate_token, mask_token
from siddha_savor.utils.validation import text_field

logger = logging.getLogger(__name__)

# Lookup order when an email exists in more than one table
ROLE_MODELS = (
    ('admin', Admin),
    ('doctor', Doctor),
    ('patient', Patient),
)

USED_TOKEN_RETENTION = timedelta(hours=24)


def find_account_by_email(email):
    """Returns (role, account) or (None, None)."""
    for role, model in ROLE_MODELS:
        account = model.query.filter_by(email=email).first()
        if account:
            return role, account
    return None, None


def create_password_reset(email, role, payload=None):
    """
    Store a new reset request for an account.

    Returns:
        PasswordReset
    """
    now = datetime.utcnow()
    ttl = timedelta(minutes=current_app.config.get('PASSWORD_RESET_TTL_MINUTES', 15))

    # Drop this email's stale requests first
    PasswordReset.query.filter(
        PasswordReset.email == email,
        PasswordReset.expires_at <= now,
    ).delete(synchronize_session=False)

    reset = PasswordReset(
        email=email,
        token=generate_token(),
        code=generate_reset_code(),
        user_role=role,
        data=payload or {},
        is_used=False,
        expires_at=now + ttl,
    )
    db.session.add(reset)
    db.session.commit()
    logger.info(f"Password reset created for {email} ({role}) token={mask_token(reset.token)}")
    return reset


def request_password_reset(email):
    """
    Start a reset for whichever account owns the email and mail it the code.

    Unknown emails get a token that is never stored, so the response does not
    reveal whether an account exists.

    Returns:
        str: reset token for the follow-up verify/reset calls
    """
    email = text_field(email, 'email').lower()
    if not email:
        raise ValidationError('Field "email" is required')

    role, account = find_account_by_email(email)
    if not account:
        logger.info(f"Password reset requested for unknown email {email}")
        return generate_token()

    reset = create_password_reset(email, role, payload={'user_id': account.id, 'name': account.name})

    from tasks.notification_tasks import send_password_reset_code
    send_password_reset_code.delay(email, reset.code, account.name)
    return reset.token


def _normalize_code(code):
    """Codes may arrive as JSON numbers; compare them as digit strings."""
    if code is None or isinstance(code, bool):
        return ''
    return str(code).strip()


def verify_reset_token(token, code, now=None):
    """
    Check a token/code pair without consuming it.

    Raises:
        InvalidTokenError, TokenAlreadyUsedError, TokenExpiredError, CodeMismatchError
    """
    now = now or datetime.utcnow()
    reset = PasswordReset.query.filter_by(token=token).first() if token else None
    if not reset:
        raise InvalidTokenError('Invalid or expired verification code')
    if reset.is_used:
        raise TokenAlreadyUsedError()
    if reset.expires_at <= now:
        raise TokenExpiredError()
    if reset.code != _normalize_code(code):
        raise CodeMismatchError()
    return reset


def mark_code_verified(reset, client_ip=None):
    reset.data = {
        **(reset.data or {}),
        'verified_at': datetime.utcnow().isoformat(),
        'verification_ip': client_ip or 'unknown',
    }
    db.session.commit()


def claim_reset_token(token, code, now=None):
    """
    Atomically mark an unused, unexpired token as used. The caller commits.

    Returns:
        bool: True if this call won the claim
    """
    now = now or datetime.utcnow()
    claimed = PasswordReset.query.filter(
        PasswordReset.token == token,
        PasswordReset.code == code,
        PasswordReset.is_used.is_(False),
        PasswordReset.expires_at > now,
    ).update({'is_used': True, 'updated_at': now}, synchronize_session=False)
    return claimed == 1


def reset_password(token, code, new_password):
    """Consume the token and apply the new password in one transaction."""
    code = _normalize_code(code)
    reset = verify_reset_token(token, code)
    email, role, payload = reset.email, reset.user_role, dict(reset.data or {})

    if not claim_reset_token(token, code):
        db.session.rollback()
        raise TokenAlreadyUsedError()

    model = dict(ROLE_MODELS).get(role)
    account = None
    if model is not None:
        if payload.get('user_id'):
            account = db.session.get(model, payload['user_id'])
        if account is None or account.email != email:
            account = model.query.filter_by(email=email).first()
    if account is None:
        db.session.rollback()
        raise NotFoundError('Account not found')

    account.set_password(new_password)
    db.session.commit()

    logger.info(f"Password reset completed for {email} ({role})")
    log_audit('password_reset', 'reset', actor=email, entity_id=reset.id)


def cleanup_expired_tokens(now=None):
    """
    Delete expired requests, and used requests older than a day.

    Returns:
        int: rows removed
    """
    now = now or datetime.utcnow()
    deleted = PasswordReset.query.filter(
        or_(
            PasswordReset.expires_at <= now,
            and_(PasswordReset.is_used.is_(True), PasswordReset.created_at < now - USED_TOKEN_RETENTION),
        )
    ).delete(synchronize_session=False)
    db.session.commit()
    logger.info(f"Cleaned up {deleted} password reset token(s)")
    return deleted


def get_reset_stats(now=None):
    now = now or datetime.utcnow()
    return {
        'total': PasswordReset.query.count(),
        'active': PasswordReset.query.filter(
            PasswordReset.is_used.is_(False), PasswordReset.expires_at > now
        ).count(),
        'used': PasswordReset.query.filter(PasswordReset.is_used.is_(True)).count(),
        'expired': PasswordReset.query.filter(
            PasswordReset.is_used.is_(False), PasswordReset.expires_at <= now
        ).count(),
    }

"""
Token helpers shared by invites and password resets.
"""
import secrets
from datetime import datetime

STATUS_ACTIVE = 'ACTIVE'
STATUS_EXPIRED = 'EXPIRED'


def generate_token():
    """Opaque URL-safe token"""
    return secrets.token_urlsafe(32)


def generate_reset_code():
    """Six digit numeric code, never starting with 0"""
    return str(100000 + secrets.randbelow(900000))


def status_of(expires_at, now=None):
    """ACTIVE while expires_at is strictly in the future, EXPIRED from then on."""
    now = now or datetime.utcnow()
    return STATUS_ACTIVE if expires_at > now else STATUS_EXPIRED


def hours_remaining(expires_at, now=None):
    """Hours until expiry, floored at 0 and rounded to 2 decimals."""
    now = now or datetime.utcnow()
    hours = (expires_at - now).total_seconds() / 3600
    return round(hours, 2) if hours > 0 else 0


def mask_token(token):
    """Log-safe prefix of a token"""
    if not token:
        return None
    return f"{token[:8]}..."

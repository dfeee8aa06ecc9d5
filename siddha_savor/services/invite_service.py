"""
Invite links gating patient and doctor self-registration.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app

from siddha_savor.extensions import db
from siddha_savor.exceptions import InvalidTokenError, ValidationError
from siddha_savor.models import InviteLink
from siddha_savor.models.invite_link import INVITE_ROLES
from siddha_savor.utils.audit import log_audit
from siddha_savor.utils.tokens import (
    STATUS_ACTIVE,
    generate_token,
    hours_remaining,
    mask_token,
    status_of,
)

logger = logging.getLogger(__name__)


def build_invite_url(token):
    base_url = current_app.config.get('APP_BASE_URL', 'http://localhost:3000')
    return f"{base_url.rstrip('/')}/register?token={token}"


def create_invite(doctor_uid, role, ttl=None, created_by=None, recipient_email=None, recipient_name=None):
    """
    Issue a new invite link.

    Args:
        doctor_uid: Doctor the registering patient will belong to (None for doctor invites)
        role: 'PATIENT' or 'DOCTOR'
        ttl: timedelta; defaults to INVITE_TTL_HOURS
        created_by: doctor uid or 'ADMIN'

    Returns:
        tuple: (InviteLink, invite_url)
    """
    role = (role or '').upper()
    if role not in INVITE_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(INVITE_ROLES)}")
    if ttl is None:
        ttl = timedelta(hours=current_app.config.get('INVITE_TTL_HOURS', 168))

    token = generate_token()
    while InviteLink.query.filter_by(token=token).first():
        token = generate_token()

    invite = InviteLink(
        token=token,
        role=role,
        doctor_uid=doctor_uid,
        created_by=created_by or doctor_uid,
        recipient_email=recipient_email or None,
        recipient_name=recipient_name or None,
        expires_at=datetime.utcnow() + ttl,
    )
    db.session.add(invite)
    db.session.commit()

    invite_url = build_invite_url(token)
    logger.info(f"{role} invite generated by {invite.created_by}: token={mask_token(token)} expires={invite.expires_at.isoformat()}")
    log_audit('invite', 'create', actor=invite.created_by, entity_id=invite.id,
              details={'role': role, 'recipient_email': recipient_email})

    if recipient_email:
        from tasks.notification_tasks import send_invite
        send_invite.delay(recipient_email, invite_url, role, recipient_name, invite.expires_at.isoformat())

    return invite, invite_url


def get_invite(token):
    invite = InviteLink.query.filter_by(token=token).first() if token else None
    if not invite:
        raise InvalidTokenError('Invalid or expired registration link')
    return invite


def invite_status(token, now=None):
    """ACTIVE or EXPIRED for an existing token."""
    return status_of(get_invite(token).expires_at, now)


def validate_invite(token, role=None, now=None):
    """Return the invite if it can still be used to register, else raise InvalidTokenError."""
    invite = get_invite(token)
    if invite.is_used or status_of(invite.expires_at, now) != STATUS_ACTIVE:
        logger.warning(f"Rejected invite token {mask_token(token)} (used={invite.is_used})")
        raise InvalidTokenError('Invalid or expired registration link')
    if role and invite.role != role:
        raise InvalidTokenError('Invalid or expired registration link')
    return invite


def mark_invite_used(invite):
    """Flag the invite as consumed; the caller commits."""
    invite.is_used = True
    invite.used_at = datetime.utcnow()


def summarize_invite(invite, now=None):
    now = now or datetime.utcnow()
    data = invite.to_dict()
    data['status'] = status_of(invite.expires_at, now)
    data['hours_remaining'] = hours_remaining(invite.expires_at, now)
    data['invite_url'] = build_invite_url(invite.token)
    return data


def list_invite_summaries(limit=10, now=None):
    """Newest invites with derived status, for diagnostics."""
    invites = InviteLink.query.order_by(InviteLink.created_at.desc(), InviteLink.id.desc()).limit(limit).all()
    return [summarize_invite(invite, now) for invite in invites]


def cleanup_expired_invites(now=None):
    """Delete invites whose expiry has passed. Returns the number removed."""
    now = now or datetime.utcnow()
    deleted = InviteLink.query.filter(InviteLink.expires_at <= now).delete(synchronize_session=False)
    db.session.commit()
    logger.info(f"Removed {deleted} expired invite link(s)")
    return deleted

"""
Celery tasks for transactional emails, queued after the database commit
"""
import logging
from datetime import datetime

from siddha_savor.extensions import celery
from siddha_savor.services.email_service import (
    send_invite_email,
    send_password_reset_code_email,
    send_patient_approved_email,
    send_patient_deactivated_email,
    send_patient_reapproved_email,
    send_patient_rejected_email,
)

logger = logging.getLogger(__name__)


@celery.task(name='tasks.send_patient_approved')
def send_patient_approved(email, patient_name):
    sent = send_patient_approved_email(email, patient_name)
    if not sent:
        logger.warning(f"Approval email to {email} was not sent")
    return {'success': sent, 'email': email}


@celery.task(name='tasks.send_patient_rejected')
def send_patient_rejected(email, patient_name, reason):
    sent = send_patient_rejected_email(email, patient_name, reason)
    if not sent:
        logger.warning(f"Rejection email to {email} was not sent")
    return {'success': sent, 'email': email}


@celery.task(name='tasks.send_patient_deactivated')
def send_patient_deactivated(email, patient_name):
    sent = send_patient_deactivated_email(email, patient_name)
    if not sent:
        logger.warning(f"Deactivation email to {email} was not sent")
    return {'success': sent, 'email': email}


@celery.task(name='tasks.send_patient_reapproved')
def send_patient_reapproved(email, patient_name):
    sent = send_patient_reapproved_email(email, patient_name)
    if not sent:
        logger.warning(f"Re-approval email to {email} was not sent")
    return {'success': sent, 'email': email}


@celery.task(name='tasks.send_invite')
def send_invite(email, invite_url, role, recipient_name=None, expires_at=None):
    """
    Args:
        expires_at: ISO timestamp (tasks take JSON-serializable args)
    """
    expiry = datetime.fromisoformat(expires_at) if expires_at else None
    sent = send_invite_email(email, invite_url, role, recipient_name, expiry)
    return {'success': sent, 'email': email}


@celery.task(name='tasks.send_password_reset_code')
def send_password_reset_code(email, code, user_name=None):
    sent = send_password_reset_code_email(email, code, user_name)
    if not sent:
        logger.warning(f"Password reset code email to {email} was not sent")
    return {'success': sent, 'email': email}

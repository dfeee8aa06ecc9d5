"""
Doctor registration and admin review.
"""
import logging

from siddha_savor.extensions import db
from siddha_savor.exceptions import NotFoundError, ValidationError
from siddha_savor.models import Doctor
from siddha_savor.models.doctor import DOCTOR_APPROVED, DOCTOR_PENDING, DOCTOR_REJECTED, DOCTOR_STATUSES
from siddha_savor.models.invite_link import ROLE_DOCTOR
from siddha_savor.services.invite_service import mark_invite_used, validate_invite
from siddha_savor.utils.audit import log_audit
from siddha_savor.utils.validation import full_name, text_field

logger = logging.getLogger(__name__)


def register_doctor(token, form):
    """Create a PENDING doctor from a DOCTOR invite."""
    invite = validate_invite(token, role=ROLE_DOCTOR)

    name = full_name(form)
    email = text_field(form.get('email'), 'email').lower()
    password = text_field(form.get('password'), 'password', strip=False)

    if not name or not email or not password:
        raise ValidationError('Name, email and password are required')
    if Doctor.query.filter_by(email=email).first():
        raise ValidationError('A doctor with this email already exists')

    doctor = Doctor(
        uid=Doctor.next_uid(),
        name=name,
        email=email,
        phone=text_field(form.get('phone'), 'phone') or None,
        medical_license=text_field(form.get('medicalLicense'), 'medicalLicense') or None,
        clinic_name=text_field(form.get('clinicName'), 'clinicName') or None,
        status=DOCTOR_PENDING,
    )
    doctor.set_password(password)
    db.session.add(doctor)
    mark_invite_used(invite)
    db.session.commit()

    logger.info(f"Doctor registered: uid={doctor.uid} email={email}")
    return doctor


def list_doctors(status=None):
    query = Doctor.query
    if status:
        status = status.upper()
        if status not in DOCTOR_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(DOCTOR_STATUSES)}")
        query = query.filter(Doctor.status == status)
    return query.order_by(Doctor.created_at.desc()).all()


def _set_status(doctor_id, status, actor):
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        raise NotFoundError('Doctor not found')
    doctor.status = status
    db.session.commit()
    logger.info(f"Doctor {doctor.uid} set to {status} by {actor}")
    log_audit('doctor', status.lower(), actor=actor, entity_id=doctor.uid)
    return doctor


def approve_doctor(doctor_id, actor=None):
    return _set_status(doctor_id, DOCTOR_APPROVED, actor)


def reject_doctor(doctor_id, actor=None):
    return _set_status(doctor_id, DOCTOR_REJECTED, actor)

"""
Patient lifecycle: registration through an invite, then PENDING -> APPROVED
on approval, or deletion on rejection. A doctor can deactivate an approved
patient back to PENDING and reapprove them later.
"""
import logging
from datetime import datetime

from siddha_savor.extensions import db
from siddha_savor.exceptions import NotFoundError, ValidationError
from siddha_savor.models import Patient
from siddha_savor.models.invite_link import ROLE_PATIENT
from siddha_savor.models.patient import DIAGNOSIS_OPTIONS, PATIENT_APPROVED, PATIENT_PENDING
from siddha_savor.services.invite_service import validate_invite, mark_invite_used
from siddha_savor.utils.audit import log_audit
from siddha_savor.utils.diet_plans import get_day_plan, get_diet_plan, plan_day_for
from siddha_savor.utils.tokens import generate_token
from siddha_savor.utils.validation import full_name, text_field

logger = logging.getLogger(__name__)

ACTION_APPROVE = 'APPROVE'
ACTION_REJECT = 'REJECT'

# invite_token prefix marking a PENDING patient that was approved before
DEACTIVATED_PREFIX = 'deactivated_'


def _scoped_query(patient_id, doctor_uid=None):
    query = Patient.query.filter(Patient.id == patient_id)
    if doctor_uid:
        query = query.filter(Patient.doctor_uid == doctor_uid)
    return query


def _parse_patient_id(patient_id):
    if patient_id is None or patient_id == '' or isinstance(patient_id, bool):
        raise ValidationError('Invalid request parameters')
    try:
        return int(patient_id)
    except (TypeError, ValueError):
        raise ValidationError('Invalid request parameters')


def approve_patient(patient_id, action=ACTION_APPROVE, doctor_uid=None, actor=None):
    """
    Approve a pending patient.

    The update only matches PENDING rows, so approving an already approved
    patient is a no-op. A patient outside the doctor's scope is not found.
    """
    if action != ACTION_APPROVE:
        raise ValidationError('Invalid request parameters')
    patient_id = _parse_patient_id(patient_id)

    patient = _scoped_query(patient_id, doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')
    email, name = patient.email, patient.name

    updated = _scoped_query(patient_id, doctor_uid).filter(
        Patient.status == PATIENT_PENDING
    ).update({
        'status': PATIENT_APPROVED,
        'invite_token': None,
        'updated_at': datetime.utcnow(),
    }, synchronize_session=False)
    db.session.commit()

    if not updated:
        # Either already approved or deleted by a concurrent reject
        if not db.session.get(Patient, patient_id):
            raise NotFoundError('Patient not found')
        logger.info(f"Patient {patient_id} already approved; nothing to do")
        return False

    logger.info(f"Patient approved: id={patient_id} email={email} doctor={doctor_uid}")
    log_audit('patient', 'approve', actor=actor or doctor_uid, entity_id=patient_id)

    from tasks.notification_tasks import send_patient_approved
    send_patient_approved.delay(email, name)
    return True


def reject_patient(patient_id, reason, action=ACTION_REJECT, doctor_uid=None, actor=None):
    """
    Reject a patient by deleting the record.

    A second reject on the same id raises NotFoundError since the row is gone.
    """
    reason = text_field(reason, 'reason')
    if action != ACTION_REJECT or not reason:
        raise ValidationError('Patient ID, action, and reason are required')
    patient_id = _parse_patient_id(patient_id)

    patient = _scoped_query(patient_id, doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')
    email, name = patient.email, patient.name

    deleted = _scoped_query(patient_id, doctor_uid).delete(synchronize_session=False)
    db.session.commit()
    if not deleted:
        raise NotFoundError('Patient not found')

    logger.info(f"Patient rejected: id={patient_id} email={email} doctor={doctor_uid} reason={reason!r}")
    log_audit('patient', 'reject', actor=actor or doctor_uid, entity_id=patient_id,
              details={'email': email, 'reason': reason})

    from tasks.notification_tasks import send_patient_rejected
    send_patient_rejected.delay(email, name, reason)


def deactivate_patient(patient_id, doctor_uid=None, actor=None):
    """
    Move an approved patient back to PENDING.

    The patient keeps their record but cannot log in or receive reminders
    until reapproved. Deactivating a patient who is already pending is a
    no-op and returns False.
    """
    patient_id = _parse_patient_id(patient_id)

    patient = _scoped_query(patient_id, doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')
    email, name = patient.email, patient.name

    updated = _scoped_query(patient_id, doctor_uid).filter(
        Patient.status == PATIENT_APPROVED
    ).update({
        'status': PATIENT_PENDING,
        'invite_token': f"{DEACTIVATED_PREFIX}{generate_token()}",
        'updated_at': datetime.utcnow(),
    }, synchronize_session=False)
    db.session.commit()

    if not updated:
        if not db.session.get(Patient, patient_id):
            raise NotFoundError('Patient not found')
        logger.info(f"Patient {patient_id} already pending; nothing to deactivate")
        return False

    logger.info(f"Patient deactivated: id={patient_id} email={email} doctor={doctor_uid}")
    log_audit('patient', 'deactivate', actor=actor or doctor_uid, entity_id=patient_id)

    from tasks.notification_tasks import send_patient_deactivated
    send_patient_deactivated.delay(email, name)
    return True


def reapprove_patient(patient_id, doctor_uid=None, actor=None):
    """
    Restore a deactivated patient to APPROVED.

    Only patients deactivated after an earlier approval qualify; a fresh
    registration still goes through approve_patient.
    """
    patient_id = _parse_patient_id(patient_id)

    patient = _scoped_query(patient_id, doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')
    email, name = patient.email, patient.name

    updated = _scoped_query(patient_id, doctor_uid).filter(
        Patient.status == PATIENT_PENDING,
        Patient.invite_token.startswith(DEACTIVATED_PREFIX, autoescape=True),
    ).update({
        'status': PATIENT_APPROVED,
        'invite_token': None,
        'updated_at': datetime.utcnow(),
    }, synchronize_session=False)
    db.session.commit()

    if not updated:
        current = db.session.get(Patient, patient_id)
        if not current:
            raise NotFoundError('Patient not found')
        db.session.refresh(current)
        if current.status == PATIENT_APPROVED:
            logger.info(f"Patient {patient_id} already approved; nothing to reapprove")
            return False
        raise ValidationError('Patient has not been approved before; approve the registration instead')

    logger.info(f"Patient reapproved: id={patient_id} email={email} doctor={doctor_uid}")
    log_audit('patient', 'reapprove', actor=actor or doctor_uid, entity_id=patient_id)

    from tasks.notification_tasks import send_patient_reapproved
    send_patient_reapproved.delay(email, name)
    return True


def register_patient(token, form):
    """
    Create a PENDING patient from an invite token and the registration form.

    Args:
        token: PATIENT invite token
        form: dict with name (or firstName/lastName), email, password, phone, diagnosis

    Returns:
        Patient
    """
    invite = validate_invite(token, role=ROLE_PATIENT)

    name = full_name(form)
    email = text_field(form.get('email'), 'email').lower()
    password = text_field(form.get('password'), 'password', strip=False)
    diagnosis = form.get('diagnosis') or None

    if not name or not email or not password:
        raise ValidationError('Name, email and password are required')
    if diagnosis and diagnosis not in DIAGNOSIS_OPTIONS:
        raise ValidationError(f"Diagnosis must be one of: {', '.join(DIAGNOSIS_OPTIONS)}")
    if Patient.query.filter_by(email=email).first():
        raise ValidationError('A patient with this email already exists')

    patient = Patient(
        name=name,
        email=email,
        phone=text_field(form.get('phone'), 'phone') or None,
        diagnosis=diagnosis,
        status=PATIENT_PENDING,
        invite_token=token,
        registration_token=token,
        doctor_uid=invite.doctor_uid,
    )
    patient.set_password(password)
    db.session.add(patient)
    mark_invite_used(invite)
    db.session.commit()

    logger.info(f"Patient registered: id={patient.id} email={email} doctor={invite.doctor_uid}")
    return patient


def set_patient_diagnosis(patient_id, diagnosis, doctor_uid=None):
    """Record the diagnosis that drives the patient's diet plan."""
    if diagnosis not in DIAGNOSIS_OPTIONS:
        raise ValidationError(f"Diagnosis must be one of: {', '.join(DIAGNOSIS_OPTIONS)}")
    patient = _scoped_query(_parse_patient_id(patient_id), doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')

    patient.diagnosis = diagnosis
    db.session.commit()
    logger.info(f"Diagnosis for patient {patient.id} set to {diagnosis}")
    return patient


def list_patients(doctor_uid=None, status=None):
    query = Patient.query
    if doctor_uid:
        query = query.filter(Patient.doctor_uid == doctor_uid)
    if status:
        query = query.filter(Patient.status == status.upper())
    return query.order_by(Patient.created_at.desc()).all()


def patient_diet_plan(patient, today=None):
    """
    The patient's 7-day plan with today's meals picked out.

    Raises:
        NotFoundError: no diagnosis recorded, or no plan for it
    """
    if not patient.diagnosis:
        raise NotFoundError('No diagnosis found for patient')
    plan = get_diet_plan(patient.diagnosis)
    if not plan:
        raise NotFoundError(f'No diet plan available for {patient.diagnosis}')

    current_day = plan_day_for(today)
    return {
        'patientId': patient.id,
        'diagnosis': patient.diagnosis,
        'dietPlan': plan,
        'currentDay': current_day,
        'today': get_day_plan(patient.diagnosis, current_day),
    }


def get_patient_diet_plan(patient_id, doctor_uid=None, today=None):
    patient = _scoped_query(_parse_patient_id(patient_id), doctor_uid).first()
    if not patient:
        raise NotFoundError('Patient not found')
    return patient_diet_plan(patient, today)

"""
Doctor-facing patient review: approve or reject registrations, deactivate
and reapprove patients, set the diagnosis that drives the diet plan, read
a patient's plan, and issue patient invite links.
"""
from flask import Blueprint, request, jsonify
import logging

from siddha_savor.exceptions import PermissionDeniedError
from siddha_savor.models.invite_link import ROLE_PATIENT
from siddha_savor.services import (
    approve_patient,
    reject_patient,
    deactivate_patient,
    reapprove_patient,
    set_patient_diagnosis,
    get_patient_diet_plan,
    list_patients,
    create_invite,
)
from siddha_savor.utils.decorators import current_identity, handle_errors, require_role
from siddha_savor.utils.validation import json_body, text_field

logger = logging.getLogger(__name__)

doctor_bp = Blueprint('doctor', __name__, url_prefix='/api/doctor')


def _doctor_uid():
    _, _, claims = current_identity()
    doctor_uid = claims.get('doctor_uid')
    if not doctor_uid:
        raise PermissionDeniedError('Doctor account required')
    return doctor_uid


@doctor_bp.route('/patients', methods=['GET'])
@require_role('doctor')
@handle_errors('list_doctor_patients')
def get_patients():
    """List this doctor's patients. Query: ?status=PENDING|APPROVED"""
    patients = list_patients(doctor_uid=_doctor_uid(), status=request.args.get('status'))
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in patients]
    }), 200


@doctor_bp.route('/patients/approve', methods=['POST'])
@require_role('doctor')
@handle_errors('approve_patient')
def approve():
    """
    Body: { "patientId": 42, "action": "APPROVE" }
    """
    data = json_body()
    doctor_uid = _doctor_uid()

    changed = approve_patient(
        data.get('patientId'),
        action=data.get('action'),
        doctor_uid=doctor_uid,
        actor=doctor_uid,
    )

    return jsonify({
        'success': True,
        'message': 'Patient approved successfully' if changed else 'Patient is already approved'
    }), 200


@doctor_bp.route('/patients/reject', methods=['POST'])
@require_role('doctor')
@handle_errors('reject_patient')
def reject():
    """
    Body: { "patientId": 7, "action": "REJECT", "reason": "duplicate record" }
    """
    data = json_body()
    doctor_uid = _doctor_uid()

    reject_patient(
        data.get('patientId'),
        data.get('reason'),
        action=data.get('action'),
        doctor_uid=doctor_uid,
        actor=doctor_uid,
    )

    return jsonify({
        'success': True,
        'message': 'Patient rejected and removed'
    }), 200


@doctor_bp.route('/patients/deactivate', methods=['POST'])
@require_role('doctor')
@handle_errors('deactivate_patient')
def deactivate():
    """
    Body: { "patientId": 42 }
    Moves an approved patient back to PENDING.
    """
    data = json_body()
    doctor_uid = _doctor_uid()

    changed = deactivate_patient(data.get('patientId'), doctor_uid=doctor_uid, actor=doctor_uid)

    return jsonify({
        'success': True,
        'message': 'Patient deactivated successfully' if changed else 'Patient is already pending'
    }), 200


@doctor_bp.route('/patients/reapprove', methods=['POST'])
@require_role('doctor')
@handle_errors('reapprove_patient')
def reapprove():
    """
    Body: { "patientId": 42 }
    """
    data = json_body()
    doctor_uid = _doctor_uid()

    changed = reapprove_patient(data.get('patientId'), doctor_uid=doctor_uid, actor=doctor_uid)

    return jsonify({
        'success': True,
        'message': 'Patient reapproved successfully' if changed else 'Patient is already approved'
    }), 200


@doctor_bp.route('/patients/<int:patient_id>/diagnosis', methods=['PUT'])
@require_role('doctor')
@handle_errors('set_patient_diagnosis')
def update_diagnosis(patient_id):
    data = json_body()
    patient = set_patient_diagnosis(patient_id, data.get('diagnosis'), doctor_uid=_doctor_uid())
    return jsonify({
        'success': True,
        'data': patient.to_dict(),
        'message': 'Diagnosis updated'
    }), 200


@doctor_bp.route('/patients/<int:patient_id>/diet-plan', methods=['GET'])
@require_role('doctor')
@handle_errors('get_patient_diet_plan')
def get_diet_plan(patient_id):
    """The patient's 7-day plan for their diagnosis, with today's meals."""
    plan = get_patient_diet_plan(patient_id, doctor_uid=_doctor_uid())
    return jsonify({'success': True, 'data': plan}), 200


@doctor_bp.route('/invites/generate', methods=['POST'])
@require_role('doctor')
@handle_errors('generate_invite')
def generate_invite():
    """
    Body: { "role": "PATIENT", "recipientEmail"?: "...", "recipientName"?: "..." }
    Doctors can only invite patients.
    """
    data = json_body()
    role = (text_field(data.get('role'), 'role') or ROLE_PATIENT).upper()
    if role != ROLE_PATIENT:
        return jsonify({
            'success': False,
            'error': 'Doctors can only generate patient invites'
        }), 400

    doctor_uid = _doctor_uid()
    invite, invite_url = create_invite(
        doctor_uid,
        role,
        created_by=doctor_uid,
        recipient_email=text_field(data.get('recipientEmail'), 'recipientEmail'),
        recipient_name=text_field(data.get('recipientName'), 'recipientName'),
    )

    return jsonify({
        'success': True,
        'data': {
            'invite': invite.to_dict(),
            'inviteUrl': invite_url,
        }
    }), 201

"""
Patient self-service: the logged-in patient's diet plan and meals for a day.
"""
from datetime import date
import logging

from flask import Blueprint, request, jsonify

from siddha_savor.extensions import db
from siddha_savor.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from siddha_savor.models import Patient
from siddha_savor.services import patient_diet_plan
from siddha_savor.utils.decorators import current_identity, handle_errors, require_role
from siddha_savor.utils.diet_plans import MEAL_TIMES, MEAL_TYPES, get_day_plan, plan_day_for

logger = logging.getLogger(__name__)

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patient')


def _current_patient():
    _, user_id, _ = current_identity()
    patient = db.session.get(Patient, user_id)
    if not patient:
        raise NotFoundError('Patient not found')
    # Tokens outlive a deactivation
    if patient.is_pending:
        raise PermissionDeniedError('Your registration is pending doctor approval')
    return patient


def _requested_date():
    raw = request.args.get('date')
    if not raw:
        return date.today()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError('Date must be YYYY-MM-DD')


@patient_bp.route('/diet-plan', methods=['GET'])
@require_role('patient')
@handle_errors('patient_diet_plan')
def get_diet_plan():
    """Full 7-day plan for the patient's diagnosis. Query: ?date=YYYY-MM-DD"""
    plan = patient_diet_plan(_current_patient(), _requested_date())
    return jsonify({'success': True, 'data': plan}), 200


@patient_bp.route('/meals', methods=['GET'])
@require_role('patient')
@handle_errors('patient_meals')
def get_meals():
    """
    Meals planned for one day (today by default).
    Query: ?date=YYYY-MM-DD
    """
    patient = _current_patient()
    if not patient.diagnosis:
        raise NotFoundError('No diagnosis found for patient')

    day = _requested_date()
    day_number = plan_day_for(day)
    day_plan = get_day_plan(patient.diagnosis, day_number)
    if not day_plan:
        raise NotFoundError(f'No diet plan available for {patient.diagnosis}')

    meals = [
        {'mealType': meal_type, 'time': MEAL_TIMES[meal_type], 'items': day_plan[meal_type]}
        for meal_type in MEAL_TYPES
    ]
    return jsonify({
        'success': True,
        'data': {
            'date': day.isoformat(),
            'day': day_number,
            'diagnosis': patient.diagnosis,
            'meals': meals,
            'notes': day_plan.get('notes'),
        }
    }), 200

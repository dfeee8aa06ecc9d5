"""
Meal reminder triggers: an admin test send, and the endpoints an external
cron or scheduler hits when Celery beat is not running.
"""
from datetime import datetime
import logging

from flask import Blueprint, jsonify, current_app

from siddha_savor.services import dispatch, meal_type_for_time, send_test_reminder
from siddha_savor.utils.decorators import handle_errors, require_cron_secret, require_role
from siddha_savor.utils.validation import json_body, text_field
from siddha_savor.utils.timing import timer_from_config

logger = logging.getLogger(__name__)

reminders_bp = Blueprint('reminders', __name__, url_prefix='/api')


def _summary(results):
    sent = sum(1 for r in results if r['sent'])
    return sent, len(results) - sent


@reminders_bp.route('/test/meal-reminder', methods=['POST'])
@require_role('admin')
@handle_errors('test_meal_reminder')
def test_meal_reminder():
    """
    Body: { "patientEmail": "...", "patientName"?: "...", "mealType"?: "breakfast" }
    """
    data = json_body()
    patient_email = text_field(data.get('patientEmail'), 'patientEmail')
    if not patient_email:
        return jsonify({
            'success': False,
            'error': 'Patient email is required'
        }), 400

    if not send_test_reminder(patient_email, text_field(data.get('patientName'), 'patientName'),
                              data.get('mealType')):
        return jsonify({
            'success': False,
            'error': 'Failed to send test email'
        }), 500

    return jsonify({
        'success': True,
        'message': f'Test meal reminder sent to {patient_email}'
    }), 200


@reminders_bp.route('/cron/meal-reminders', methods=['POST'])
@require_cron_secret
@handle_errors('cron_meal_reminders')
def cron_meal_reminders():
    """Body: { "mealType": "breakfast" | "lunch" | "dinner" }"""
    data = json_body()
    meal_type = data.get('mealType')

    timer = timer_from_config(current_app.config)
    with timer.measure(f'meal_reminder.dispatch.{meal_type}'):
        results = dispatch(meal_type, timer=timer)

    sent, failed = _summary(results)
    return jsonify({
        'success': True,
        'data': results,
        'message': f'{meal_type} reminders: {sent} sent, {failed} failed'
    }), 200


@reminders_bp.route('/scheduler', methods=['GET'])
@require_cron_secret
@handle_errors('scheduler')
def scheduler():
    """Dispatch whichever meal slot's window contains the current time."""
    now = datetime.now()
    meal_type = meal_type_for_time(now)

    reminder_result = None
    if meal_type:
        timer = timer_from_config(current_app.config)
        with timer.measure(f'meal_reminder.dispatch.{meal_type}'):
            results = dispatch(meal_type, timer=timer)
        sent, failed = _summary(results)
        reminder_result = {'sent': sent, 'failed': failed, 'results': results}
    else:
        logger.info(f"Scheduler hit at {now.strftime('%H:%M')}: no meal window open")

    return jsonify({
        'success': True,
        'mealType': meal_type,
        'currentTime': now.isoformat(),
        'reminderResult': reminder_result
    }), 200

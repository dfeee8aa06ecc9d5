"""
Meal reminders: pick approved patients whose diet plan has an entry for the
meal slot and mail each one today's items.
"""
import logging
import time
from datetime import date

from flask import current_app

from siddha_savor.exceptions import ValidationError
from siddha_savor.models import Patient
from siddha_savor.models.patient import PATIENT_APPROVED
from siddha_savor.services.email_service import send_meal_reminder_email
from siddha_savor.utils.diet_plans import DIET_PLANS, MEAL_TYPES, meal_items_for

logger = logging.getLogger(__name__)

# (hour, first minute, last minute) windows for the external scheduler
SCHEDULER_WINDOWS = {
    'breakfast': (8, 0, 5),
    'lunch': (12, 25, 35),
    'dinner': (20, 0, 5),
}


def validate_meal_type(meal_type):
    if meal_type not in MEAL_TYPES:
        raise ValidationError('Invalid meal type')
    return meal_type


def meal_type_for_time(now):
    """Meal slot whose scheduler window contains now, else None."""
    for meal_type, (hour, first_minute, last_minute) in SCHEDULER_WINDOWS.items():
        if now.hour == hour and first_minute <= now.minute <= last_minute:
            return meal_type
    return None


def compose_reminder(patient, meal_type, today=None):
    """
    Build the reminder payload for one patient.

    Returns:
        dict or None: None when the patient's diagnosis has nothing planned
    """
    if not patient.diagnosis:
        return None
    items, notes = meal_items_for(patient.diagnosis, meal_type, today)
    if not items:
        return None
    return {
        'patientName': patient.name or 'Patient',
        'patientEmail': patient.email,
        'diagnosis': patient.diagnosis,
        'mealType': meal_type,
        'mealItems': items,
        'notes': notes,
    }


def deliver_with_retry(reminder, send=None, max_attempts=None, retry_delay=None):
    """
    Send a reminder, retrying up to max_attempts with a linear backoff.

    Returns:
        tuple: (sent, attempts)
    """
    send = send or send_meal_reminder_email
    if max_attempts is None:
        max_attempts = current_app.config.get('MEAL_REMINDER_MAX_ATTEMPTS', 3)
    if retry_delay is None:
        retry_delay = current_app.config.get('MEAL_REMINDER_RETRY_DELAY', 1)
    max_attempts = max(1, int(max_attempts))

    for attempt in range(1, max_attempts + 1):
        try:
            if send(reminder):
                if attempt > 1:
                    logger.info(f"{reminder['mealType']} reminder to {reminder['patientEmail']} sent on attempt {attempt}")
                return True, attempt
            logger.warning(f"{reminder['mealType']} reminder to {reminder['patientEmail']} failed (attempt {attempt}/{max_attempts})")
        except Exception as e:
            logger.warning(f"{reminder['mealType']} reminder to {reminder['patientEmail']} raised on attempt {attempt}/{max_attempts}: {e}")
        if attempt < max_attempts and retry_delay:
            time.sleep(retry_delay * attempt)

    logger.error(f"Giving up on {reminder['mealType']} reminder to {reminder['patientEmail']} after {max_attempts} attempt(s)")
    return False, max_attempts


def send_one(patient, meal_type, today=None, timer=None, send=None):
    """
    Compose and deliver a single patient's reminder.

    Returns:
        bool: True if the transport reported success
    """
    sent, _ = _send_reminder(patient, validate_meal_type(meal_type), today, timer, send)
    return sent


def _send_reminder(patient, meal_type, today, timer, send):
    reminder = compose_reminder(patient, meal_type, today)
    if reminder is None:
        logger.info(f"No {meal_type} plan for patient {patient.id} ({patient.diagnosis})")
        return False, 0
    if timer is None:
        return deliver_with_retry(reminder, send=send)
    with timer.measure(f"meal_reminder.send.{patient.id}"):
        return deliver_with_retry(reminder, send=send)


def send_test_reminder(patient_email, patient_name=None, meal_type=None, send=None):
    """Send fixed sample content to an address, e.g. to check SMTP settings."""
    reminder = {
        'patientName': patient_name or 'Test Patient',
        'patientEmail': patient_email,
        'diagnosis': 'Test Diagnosis',
        'mealType': validate_meal_type(meal_type or 'breakfast'),
        'mealItems': ['Test meal item 1', 'Test meal item 2'],
        'notes': 'This is a test reminder',
    }
    sent, _ = deliver_with_retry(reminder, send=send)
    return sent


def dispatch(meal_type, today=None, timer=None, send=None):
    """
    Send the meal_type reminder to every approved patient with a planned meal.

    No record is kept of who was reminded; calling this twice resends.

    Returns:
        list[dict]: one result per patient attempted
    """
    validate_meal_type(meal_type)
    today = today or date.today()

    patients = Patient.query.filter(
        Patient.status == PATIENT_APPROVED,
        Patient.diagnosis.in_(list(DIET_PLANS.keys())),
    ).order_by(Patient.id).all()

    results = []
    for patient in patients:
        sent, attempts = _send_reminder(patient, meal_type, today, timer, send)
        if attempts == 0:
            continue
        results.append({
            'patientId': patient.id,
            'email': patient.email,
            'mealType': meal_type,
            'sent': sent,
            'attempts': attempts,
        })

    sent_count = sum(1 for r in results if r['sent'])
    logger.info(f"{meal_type} dispatch finished: {sent_count}/{len(results)} reminder(s) sent")
    return results

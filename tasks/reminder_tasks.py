"""
Scheduled jobs: meal reminders per slot and password reset cleanup
"""
import logging
from datetime import datetime

from flask import current_app

from siddha_savor.extensions import celery, db
from siddha_savor.services.meal_reminder_service import dispatch
from siddha_savor.services.password_reset_service import cleanup_expired_tokens, get_reset_stats
from siddha_savor.utils.timing import timer_from_config

logger = logging.getLogger(__name__)


@celery.task(name='tasks.send_meal_reminders')
def send_meal_reminders(meal_type):
    """
    Send the meal_type reminder to all eligible patients

    Returns:
        dict: Dispatch results
    """
    timer = timer_from_config(current_app.config)
    try:
        with timer.measure(f"meal_reminders.{meal_type}"):
            results = dispatch(meal_type, timer=timer)
        return {
            'success': True,
            'meal_type': meal_type,
            'sent': sum(1 for r in results if r['sent']),
            'failed': sum(1 for r in results if not r['sent']),
            'timings_ms': timer.summary(),
            'timestamp': datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Error sending {meal_type} reminders: {e}", exc_info=True)
        db.session.rollback()
        return {'success': False, 'error': str(e)}


@celery.task(name='tasks.cleanup_password_resets')
def cleanup_password_resets():
    """
    Purge expired password reset tokens

    Returns:
        dict: Cleanup results
    """
    try:
        cleaned = cleanup_expired_tokens()
        return {
            'success': True,
            'cleaned_tokens': cleaned,
            'stats': get_reset_stats(),
            'timestamp': datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Error cleaning password reset tokens: {e}", exc_info=True)
        db.session.rollback()
        return {'success': False, 'error': str(e)}

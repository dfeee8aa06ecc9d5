"""
Email Service for approval, invite, password reset and meal reminder mails
"""
import smtplib
import logging
from datetime import datetime
from email.header import Header
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from urllib.parse import quote, urlencode

from flask import current_app
from markupsafe import escape

from siddha_savor.utils.diet_plans import MEAL_TIMES

logger = logging.getLogger(__name__)

MEAL_EMOJIS = {
    'breakfast': '🌅',
    'lunch': '☀️',
    'dinner': '🌙',
}

BASE_STYLE = """
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background: #10b981; color: white; padding: 20px; text-align: center; border-radius: 5px 5px 0 0; }
        .content { background: #f8fafc; padding: 30px; border: 1px solid #ddd; }
        .box { background: white; padding: 15px 20px; border-radius: 5px; margin: 20px 0; border-left: 4px solid #10b981; }
        .warning { background: #fef2f2; padding: 15px; border-left: 4px solid #dc2626; margin: 20px 0; }
        .button { display: inline-block; background: #10b981; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; }
        .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


def _wrap_html(title, inner):
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>{BASE_STYLE}</style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🌿 Siddha Savor</h1>
            <p>{title}</p>
        </div>
        <div class="content">
            {inner}
        </div>
        <div class="footer">
            <p>This is an automated message from Siddha Savor Healthcare.</p>
        </div>
    </div>
</body>
</html>
    """


def _base_url():
    return current_app.config.get('APP_BASE_URL', 'http://localhost:3000').rstrip('/')


def send_email(to_email, subject, body_text, body_html=None):
    """
    Generic email sending function

    Args:
        to_email: Recipient email
        subject: Email subject
        body_text: Plain text body
        body_html: HTML body (optional)

    Returns:
        bool: True if sent successfully
    """
    try:
        mail_server = current_app.config.get('MAIL_SERVER')
        mail_port = current_app.config.get('MAIL_PORT')
        mail_use_tls = current_app.config.get('MAIL_USE_TLS')
        mail_username = current_app.config.get('MAIL_USERNAME')
        mail_password = current_app.config.get('MAIL_PASSWORD')
        mail_sender = current_app.config.get('MAIL_DEFAULT_SENDER')

        if not mail_username or not mail_password:
            logger.warning("Email not configured. Skipping '%s' to %s", subject, to_email)
            return False

        msg = MIMEMultipart('alternative')
        msg['Subject'] = Header(subject, 'utf-8')
        msg['From'] = mail_sender
        msg['To'] = to_email

        msg.attach(MIMEText(body_text, 'plain'))
        if body_html:
            msg.attach(MIMEText(body_html, 'html'))

        with smtplib.SMTP(mail_server, mail_port) as server:
            if mail_use_tls:
                server.starttls()
            server.login(mail_username, mail_password)
            server.sendmail(mail_sender, to_email, msg.as_string())

        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def send_patient_approved_email(email, patient_name):
    """Tell a patient their registration was approved."""
    login_url = f"{_base_url()}/login"
    name = patient_name or 'Patient'

    text = f"""
Dear {name},

Your patient registration has been approved by your doctor.
You can now log in to your patient portal at {login_url}

Siddha Savor Healthcare
    """
    html = _wrap_html('Registration Approved', f"""
            <h2>Dear {escape(name)},</h2>
            <p>Your patient registration has been approved by your doctor.</p>
            <p>You can now log in to your patient portal using your registered email and password.</p>
            <center><a href="{login_url}" class="button">Login to Patient Portal</a></center>
    """)
    return send_email(email, 'Patient Registration Approved - Siddha Savor', text, html)


def _new_invite_request_url(support_email, email):
    """mailto: link asking support for a fresh registration link."""
    query = urlencode({
        'subject': 'New registration link request',
        'body': f'Please send a new patient registration link to {email}.',
    }, quote_via=quote)
    return f"mailto:{support_email}?{query}"


def send_patient_rejected_email(email, patient_name, reason):
    """
    Tell a patient their registration was rejected, with the reason.

    Registration needs an invite token, so the mail points them at their
    doctor or support for a new link rather than back to the form.
    """
    support_email = current_app.config.get('SUPPORT_EMAIL')
    request_url = _new_invite_request_url(support_email, email)
    name = patient_name or 'Patient'

    text = f"""
Dear {name},

Your patient registration has not been approved at this time.
Reason: {reason}

To register with updated information, ask your doctor for a new registration link
or email {support_email}.

Siddha Savor Healthcare
    """
    html = _wrap_html('Registration Status Update', f"""
            <h2>Dear {escape(name)},</h2>
            <p>We regret to inform you that your patient registration has not been approved at this time.</p>
            <div class="warning"><strong>Reason:</strong><br>{escape(reason)}</div>
            <p>To register with updated information, ask your doctor for a new registration link.</p>
            <center><a href="{escape(request_url)}" class="button">Request a New Link</a></center>
            <p>For support, please email <a href="mailto:{escape(support_email)}">{escape(support_email)}</a></p>
    """)
    return send_email(email, 'Patient Registration Update - Siddha Savor', text, html)


def send_patient_deactivated_email(email, patient_name):
    """Tell a patient their account is back to pending."""
    support_email = current_app.config.get('SUPPORT_EMAIL')
    name = patient_name or 'Patient'

    text = f"""
Dear {name},

Your patient account has been deactivated by your doctor.
It is now pending and needs to be re-approved before you can log in again.
Please contact your doctor or {support_email} if you have any questions.

Siddha Savor Healthcare
    """
    html = _wrap_html('Account Deactivated', f"""
            <h2>Dear {escape(name)},</h2>
            <p>Your patient account has been deactivated by your doctor.</p>
            <div class="warning">Your account is now pending and needs to be re-approved before you can log in again.</div>
            <p>If you believe this was done in error, please contact your doctor or
               <a href="mailto:{escape(support_email)}">{escape(support_email)}</a>.</p>
    """)
    return send_email(email, 'Account Deactivated - Siddha Savor', text, html)


def send_patient_reapproved_email(email, patient_name):
    """Tell a deactivated patient their access is restored."""
    login_url = f"{_base_url()}/login"
    name = patient_name or 'Patient'

    text = f"""
Dear {name},

Your patient account has been re-approved by your doctor.
You can log in again at {login_url}

Siddha Savor Healthcare
    """
    html = _wrap_html('Account Re-approved', f"""
            <h2>Dear {escape(name)},</h2>
            <p>Your patient account has been re-approved by your doctor.</p>
            <p>Your diet plan and meal reminders are active again.</p>
            <center><a href="{login_url}" class="button">Login to Patient Portal</a></center>
    """)
    return send_email(email, 'Account Re-approved - Siddha Savor', text, html)


def send_invite_email(email, invite_url, role, recipient_name=None, expires_at=None):
    """Send a registration invite link."""
    name = recipient_name or 'there'
    expiry = expires_at.strftime('%d %b %Y %H:%M UTC') if expires_at else 'in 7 days'

    text = f"""
Hello {name},

You have been invited to register as a {role.lower()} on Siddha Savor.
Complete your registration here: {invite_url}

This link expires {expiry}.
    """
    html = _wrap_html('You are invited', f"""
            <h2>Hello {escape(name)},</h2>
            <p>You have been invited to register as a <strong>{escape(role.lower())}</strong> on Siddha Savor.</p>
            <center><a href="{escape(invite_url)}" class="button">Complete Registration</a></center>
            <div class="box">⏰ This link expires {expiry}.</div>
    """)
    return send_email(email, 'Your Siddha Savor Registration Link', text, html)


def send_password_reset_code_email(email, code, user_name=None):
    """Send the 6-digit password reset code."""
    minutes = current_app.config.get('PASSWORD_RESET_TTL_MINUTES', 15)
    name = user_name or email

    text = f"""
Hello {name},

Your password reset verification code is: {code}

This code expires in {minutes} minutes. If you did not request a reset, ignore this email.
    """
    html = _wrap_html('Password Reset', f"""
            <h2>Hello {escape(name)},</h2>
            <p>Use this verification code to reset your password:</p>
            <div class="box" style="font-size: 28px; letter-spacing: 6px; text-align: center;"><strong>{code}</strong></div>
            <p>This code expires in {minutes} minutes. If you did not request a reset, ignore this email.</p>
    """)
    return send_email(email, 'Password Reset - Siddha Savor', text, html)


def send_meal_reminder_email(reminder):
    """
    Send one meal reminder.

    Args:
        reminder: dict with patientName, patientEmail, diagnosis, mealType, mealItems, notes

    Returns:
        bool: True if sent successfully
    """
    meal_type = reminder['mealType']
    emoji = MEAL_EMOJIS.get(meal_type, '🍽️')
    meal_label = meal_type.capitalize()
    items = reminder.get('mealItems') or []
    notes = reminder.get('notes')

    items_text = "\n".join(f"  - {item}" for item in items)
    text = f"""
{meal_label} Time, {reminder['patientName']}!

It's {MEAL_TIMES.get(meal_type, '')} - time for your {meal_type}. Today's plan:
{items_text}
{f'Notes: {notes}' if notes else ''}

Diagnosis: {reminder['diagnosis']}
Reminder sent at: {datetime.now().strftime('%d %b %Y %H:%M')}
    """
    items_html = ''.join(f'<li>{escape(item)}</li>' for item in items)
    html = _wrap_html('Traditional Healthcare Management', f"""
            <h2>{emoji} {meal_label} Time, {escape(reminder['patientName'])}!</h2>
            <p>It's {MEAL_TIMES.get(meal_type, '')} - time for your {meal_type}! Here's your Siddha diet plan for today.</p>
            <div class="box">
                <h3>{emoji} Today's {meal_label}</h3>
                <ul>{items_html}</ul>
            </div>
            {f'<div class="box"><h4>📝 Siddha Medicine Notes</h4><p>{escape(notes)}</p></div>' if notes else ''}
            <center><a href="{_base_url()}/dashboard/patient" class="button">View Today's Plan</a></center>
            <p><strong>Diagnosis:</strong> {escape(reminder['diagnosis'])}</p>
    """)
    subject = f"🍽️ {emoji} {meal_label} Reminder - Siddha Savor"
    return send_email(reminder['patientEmail'], subject, text, html)

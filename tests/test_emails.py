from datetime import datetime

from siddha_savor.services import (
    send_invite_email,
    send_meal_reminder_email,
    send_patient_approved_email,
    send_patient_rejected_email,
)


def _html(entry):
    for part in entry['message'].walk():
        if part.get_content_type() == 'text/html':
            return part.get_payload(decode=True).decode('utf-8')
    return ''


def test_rejection_mail_escapes_name_and_reason(app, outbox):
    assert send_patient_rejected_email('kavya@example.com', '<b>Kavya</b>', '<script>alert(1)</script>')

    html = _html(outbox[0])
    assert '<b>Kavya</b>' not in html
    assert '&lt;b&gt;Kavya&lt;/b&gt;' in html
    assert '<script>' not in html
    assert '&lt;script&gt;alert(1)&lt;/script&gt;' in html


def test_rejection_mail_asks_for_a_new_link(app, outbox, message_text):
    send_patient_rejected_email('kavya+new@example.com', 'Kavya', 'duplicate record')

    text = message_text(outbox[0])
    html = _html(outbox[0])
    assert 'ask your doctor for a new registration link' in text
    assert 'register again' not in text
    assert 'Re-register' not in html
    assert 'mailto:support@siddhasavor.com?subject=New%20registration%20link%20request' in html
    assert 'kavya%2Bnew%40example.com' in html
    assert 'kavya+new@example.com' not in html


def test_invite_mail_escapes_recipient_name(app, outbox, message_text):
    send_invite_email('new@example.com', 'http://localhost:3000/register?token=abc', 'PATIENT',
                      recipient_name='<img src=x onerror=alert(1)>', expires_at=datetime(2026, 3, 16, 9, 0))

    html = _html(outbox[0])
    assert '<img' not in html
    assert '&lt;img src=x onerror=alert(1)&gt;' in html
    assert 'Hello <img src=x onerror=alert(1)>' in message_text(outbox[0])


def test_approval_and_reminder_mails_escape_patient_name(app, outbox):
    send_patient_approved_email('a@example.com', 'Kavya & <i>co</i>')
    send_meal_reminder_email({
        'patientName': '<u>Kavya</u>',
        'patientEmail': 'a@example.com',
        'diagnosis': 'Anemia',
        'mealType': 'lunch',
        'mealItems': ['Rice & <dal>'],
        'notes': None,
    })

    assert 'Kavya &amp; &lt;i&gt;co&lt;/i&gt;' in _html(outbox[0])
    reminder_html = _html(outbox[1])
    assert '&lt;u&gt;Kavya&lt;/u&gt;' in reminder_html
    assert '<li>Rice &amp; &lt;dal&gt;</li>' in reminder_html

import pytest

from siddha_savor.exceptions import ValidationError
from siddha_savor.extensions import db
from siddha_savor.models import Doctor, Patient, PasswordReset
from siddha_savor.models.patient import PATIENT_PENDING
from siddha_savor.services import approve_patient, reject_patient, request_password_reset
from siddha_savor.utils.validation import full_name, text_field


def test_text_field():
    assert text_field(None, 'email') == ''
    assert text_field('  a@b.c ', 'email') == 'a@b.c'
    assert text_field(' pass ', 'password', strip=False) == ' pass '
    with pytest.raises(ValidationError, match='"email" must be a string'):
        text_field(12, 'email')


def test_full_name_falls_back_to_first_and_last():
    assert full_name({'name': ' Selvi '}) == 'Selvi'
    assert full_name({'firstName': 'Arun', 'lastName': 'Kumar'}) == 'Arun Kumar'
    with pytest.raises(ValidationError):
        full_name({'name': ['Selvi']})


def test_non_object_body_is_a_bad_request(client, app):
    response = client.post('/api/auth/forgot-password', json=['a'])
    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'Request body must be a JSON object'}

    garbled = client.post('/api/auth/login', data='{not json', content_type='application/json')
    assert garbled.status_code == 400


def test_login_with_numeric_email_is_a_bad_request(client, admin):
    response = client.post('/api/auth/login', json={'email': 12, 'password': 'admin123', 'role': 'admin'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False

    response = client.post('/api/auth/login', json={'email': admin.email, 'password': 123, 'role': 'admin'})
    assert response.status_code == 400


def test_request_password_reset_needs_string_email(app):
    with pytest.raises(ValidationError):
        request_password_reset(['meena@clinic.test'])


def test_numeric_reset_code_is_accepted(client, doctor, outbox):
    token = client.post('/api/auth/forgot-password', json={'email': doctor.email}).get_json()['token']
    code = int(PasswordReset.query.filter_by(token=token).one().code)

    verified = client.post('/api/auth/verify-reset-code', json={'token': token, 'code': code})
    assert verified.status_code == 200

    done = client.post('/api/auth/reset-password', json={
        'token': token, 'code': code, 'newPassword': 'fresh-pass', 'confirmPassword': 'fresh-pass',
    })
    assert done.status_code == 200

    db.session.expire_all()
    assert db.session.get(Doctor, doctor.id).check_password('fresh-pass')


def test_boolean_patient_id_is_refused(client, doctor_headers, make_patient, outbox):
    patient = make_patient()
    assert patient.id == 1

    with pytest.raises(ValidationError):
        approve_patient(True)

    response = client.post('/api/doctor/patients/approve', headers=doctor_headers,
                           json={'patientId': True, 'action': 'APPROVE'})
    assert response.status_code == 400

    db.session.expire_all()
    assert db.session.get(Patient, 1).status == PATIENT_PENDING
    assert outbox == []


def test_non_string_reason_is_refused(client, doctor_headers, make_patient):
    patient = make_patient()
    patient_id = patient.id

    with pytest.raises(ValidationError):
        reject_patient(patient_id, 5)

    response = client.post('/api/doctor/patients/reject', headers=doctor_headers,
                           json={'patientId': patient_id, 'action': 'REJECT', 'reason': 5})
    assert response.status_code == 400
    assert db.session.get(Patient, patient_id) is not None


def test_registration_with_non_string_fields_is_a_bad_request(client, make_invite):
    make_invite(token='join-me')
    response = client.post('/api/auth/register-patient', json={
        'token': 'join-me', 'name': 12, 'email': 'selvi@example.com', 'password': 'secret1',
    })
    assert response.status_code == 400
    assert 'name' in response.get_json()['error']

    response = client.post('/api/auth/register-patient', json={
        'token': 'join-me', 'name': 'Selvi', 'email': {'x': 1}, 'password': 'secret1',
    })
    assert response.status_code == 400
    assert Patient.query.count() == 0


def test_invite_recipient_must_be_text(client, doctor_headers, outbox):
    response = client.post('/api/doctor/invites/generate', headers=doctor_headers,
                           json={'recipientEmail': ['a@example.com']})
    assert response.status_code == 400
    assert outbox == []

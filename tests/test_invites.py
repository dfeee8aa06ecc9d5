from datetime import datetime, timedelta

import pytest

from siddha_savor.exceptions import InvalidTokenError, ValidationError
from siddha_savor.models import InviteLink
from siddha_savor.services import cleanup_expired_invites, create_invite, invite_status, validate_invite
from siddha_savor.services.invite_service import list_invite_summaries
from siddha_savor.utils.tokens import STATUS_ACTIVE, STATUS_EXPIRED


def test_create_invite_defaults_to_seven_days(app, doctor):
    invite, url = create_invite(doctor.uid, 'patient')

    assert invite.role == 'PATIENT'
    assert invite.created_by == doctor.uid
    assert url == f"http://localhost:3000/register?token={invite.token}"
    lifetime = invite.expires_at - datetime.utcnow()
    assert timedelta(hours=167) < lifetime <= timedelta(hours=168)


def test_create_invite_rejects_unknown_role(app, doctor):
    with pytest.raises(ValidationError):
        create_invite(doctor.uid, 'NURSE')


def test_create_invite_mails_recipient(app, doctor, outbox, message_text):
    invite, url = create_invite(doctor.uid, 'PATIENT', recipient_email='new@example.com', recipient_name='Lakshmi')
    assert outbox[0]['to'] == 'new@example.com'
    body = message_text(outbox[0])
    assert url in body
    assert 'Lakshmi' in body


def test_invite_status_flips_at_expiry(make_invite):
    invite = make_invite(token='tick', expires_in=timedelta(hours=1))
    assert invite_status('tick') == STATUS_ACTIVE
    assert invite_status('tick', now=invite.expires_at) == STATUS_EXPIRED


def test_validate_invite_refuses_expired_used_and_unknown(make_invite):
    make_invite(token='old', expires_in=timedelta(hours=-1))
    make_invite(token='spent', is_used=True)

    for token in ('old', 'spent', 'missing', None):
        with pytest.raises(InvalidTokenError):
            validate_invite(token)


def test_validate_invite_checks_role(make_invite):
    make_invite(token='p1', role='PATIENT')
    assert validate_invite('p1', role='PATIENT').token == 'p1'
    with pytest.raises(InvalidTokenError):
        validate_invite('p1', role='DOCTOR')


def test_cleanup_removes_only_expired(make_invite):
    make_invite(token='stale', expires_in=timedelta(minutes=-5))
    make_invite(token='fresh')

    assert cleanup_expired_invites() == 1
    assert [i.token for i in InviteLink.query.all()] == ['fresh']
    assert cleanup_expired_invites() == 0


def test_invite_summaries_include_status_and_hours(make_invite):
    make_invite(token='soon', expires_in=timedelta(hours=2))
    make_invite(token='gone', expires_in=timedelta(hours=-2))

    summaries = {s['token']: s for s in list_invite_summaries()}
    assert summaries['soon']['status'] == STATUS_ACTIVE
    assert 1.9 < summaries['soon']['hours_remaining'] <= 2
    assert summaries['gone']['status'] == STATUS_EXPIRED
    assert summaries['gone']['hours_remaining'] == 0


def test_doctor_generates_patient_invite(client, doctor_headers):
    response = client.post('/api/doctor/invites/generate', headers=doctor_headers, json={'role': 'PATIENT'})
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['invite']['doctor_uid'] == 'DOC001'
    assert data['inviteUrl'].endswith(data['invite']['token'])


def test_doctor_cannot_generate_doctor_invite(client, doctor_headers):
    response = client.post('/api/doctor/invites/generate', headers=doctor_headers, json={'role': 'DOCTOR'})
    assert response.status_code == 400


def test_validate_token_route(client, make_invite):
    make_invite(token='good')
    make_invite(token='expired', expires_in=timedelta(hours=-1))

    response = client.get('/api/auth/validate-token?token=good')
    assert response.status_code == 200
    assert response.get_json()['data']['doctor_uid'] == 'DOC001'

    assert client.get('/api/auth/validate-token?token=expired').status_code == 404
    assert client.get('/api/auth/validate-token').status_code == 400


def test_register_patient_route(client, make_invite):
    make_invite(token='join-me')
    response = client.post('/api/auth/register-patient', json={
        'token': 'join-me',
        'name': 'Selvi',
        'email': 'selvi@example.com',
        'password': 'secret1',
        'diagnosis': 'Anemia',
    })
    assert response.status_code == 201
    assert response.get_json()['data']['status'] == 'PENDING'

    again = client.post('/api/auth/register-patient', json={
        'token': 'join-me', 'name': 'Other', 'email': 'other@example.com', 'password': 'secret1',
    })
    assert again.status_code == 400


def test_register_doctor_route(client, make_invite):
    make_invite(token='doc-join', role='DOCTOR', doctor_uid=None)
    response = client.post('/api/auth/register-doctor', json={
        'token': 'doc-join',
        'name': 'Dr. Anand',
        'email': 'anand@clinic.test',
        'password': 'secret1',
        'medicalLicense': 'TN-1234',
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['uid'] == 'DOC002'
    assert data['status'] == 'PENDING'

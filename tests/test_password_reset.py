from datetime import datetime, timedelta

import pytest

from siddha_savor.exceptions import (
    CodeMismatchError,
    InvalidTokenError,
    TokenAlreadyUsedError,
    TokenExpiredError,
)
from siddha_savor.extensions import db
from siddha_savor.models import PasswordReset
from siddha_savor.services import (
    claim_reset_token,
    cleanup_expired_tokens,
    create_password_reset,
    get_reset_stats,
    request_password_reset,
    reset_password,
    verify_reset_token,
)


def _reset(email='meena@clinic.test', role='doctor', **overrides):
    reset = create_password_reset(email, role)
    for key, value in overrides.items():
        setattr(reset, key, value)
    db.session.commit()
    return reset


def test_request_mails_code_to_known_account(doctor, outbox, message_text):
    token = request_password_reset('Meena@Clinic.test')

    reset = PasswordReset.query.filter_by(token=token).one()
    assert reset.user_role == 'doctor'
    assert reset.data['user_id'] == doctor.id
    assert outbox[0]['to'] == 'meena@clinic.test'
    assert reset.code in message_text(outbox[0])


def test_request_for_unknown_email_stores_nothing(app, outbox):
    token = request_password_reset('nobody@example.com')
    assert token
    assert PasswordReset.query.count() == 0
    assert outbox == []


def test_verify_checks_in_order(doctor):
    reset = _reset()
    assert verify_reset_token(reset.token, reset.code).id == reset.id

    with pytest.raises(InvalidTokenError):
        verify_reset_token('bogus', reset.code)
    with pytest.raises(CodeMismatchError):
        verify_reset_token(reset.token, '000000')
    with pytest.raises(TokenExpiredError):
        verify_reset_token(reset.token, reset.code, now=reset.expires_at)


def test_verify_rejects_used_token_before_expiry(doctor):
    reset = _reset(is_used=True)
    assert reset.expires_at > datetime.utcnow()
    with pytest.raises(TokenAlreadyUsedError):
        verify_reset_token(reset.token, reset.code)


def test_claim_succeeds_once(doctor):
    reset = _reset()
    assert claim_reset_token(reset.token, reset.code) is True
    db.session.commit()
    assert claim_reset_token(reset.token, reset.code) is False


def test_reset_password_sets_new_password_and_consumes_token(doctor):
    reset = _reset()
    reset_password(reset.token, reset.code, 'n3w-secret')

    db.session.expire_all()
    assert doctor.check_password('n3w-secret')
    assert PasswordReset.query.filter_by(token=reset.token).one().is_used is True

    with pytest.raises(TokenAlreadyUsedError):
        reset_password(reset.token, reset.code, 'another1')


def test_cleanup_removes_expired_and_old_used_rows(doctor):
    now = datetime.utcnow()
    _reset(email='a@example.com', expires_at=now - timedelta(minutes=1))
    _reset(email='b@example.com', is_used=True, created_at=now - timedelta(hours=25), expires_at=now + timedelta(minutes=5))
    live = _reset()

    assert cleanup_expired_tokens() == 2
    assert [r.token for r in PasswordReset.query.all()] == [live.token]
    assert cleanup_expired_tokens() == 0


def test_reset_stats(doctor):
    _reset()
    _reset(is_used=True)
    stats = get_reset_stats()
    assert stats == {'total': 2, 'active': 1, 'used': 1, 'expired': 0}


def test_forgot_verify_reset_flow(client, doctor, outbox):
    response = client.post('/api/auth/forgot-password', json={'email': doctor.email})
    assert response.status_code == 200
    token = response.get_json()['token']
    code = PasswordReset.query.filter_by(token=token).one().code

    wrong = client.post('/api/auth/verify-reset-code', json={'token': token, 'code': 'abcdef'})
    assert wrong.status_code == 400

    verified = client.post('/api/auth/verify-reset-code', json={'token': token, 'code': code})
    assert verified.status_code == 200

    mismatch = client.post('/api/auth/reset-password', json={
        'token': token, 'code': code, 'newPassword': 'fresh-pass', 'confirmPassword': 'other-pass',
    })
    assert mismatch.status_code == 400

    too_short = client.post('/api/auth/reset-password', json={
        'token': token, 'code': code, 'newPassword': 'abc', 'confirmPassword': 'abc',
    })
    assert too_short.status_code == 400

    done = client.post('/api/auth/reset-password', json={
        'token': token, 'code': code, 'newPassword': 'fresh-pass', 'confirmPassword': 'fresh-pass',
    })
    assert done.status_code == 200

    login = client.post('/api/auth/login', json={'email': doctor.email, 'password': 'fresh-pass', 'role': 'doctor'})
    assert login.status_code == 200


def test_forgot_password_does_not_reveal_unknown_email(client, app):
    response = client.post('/api/auth/forgot-password', json={'email': 'ghost@example.com'})
    assert response.status_code == 200
    assert response.get_json()['success'] is True
    assert response.get_json()['token']


def test_admin_password_reset_cleanup_route(client, admin_headers, doctor):
    _reset(expires_at=datetime.utcnow() - timedelta(minutes=1))

    response = client.post('/api/admin/password-reset-cleanup', headers=admin_headers)
    data = response.get_json()['data']
    assert data['cleanedTokens'] == 1
    assert data['stats']['total'] == 0

    stats = client.get('/api/admin/password-reset-cleanup', headers=admin_headers)
    assert stats.get_json()['data']['total'] == 0

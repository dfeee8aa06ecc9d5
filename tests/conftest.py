import email
from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from siddha_savor import create_app
from siddha_savor.extensions import db
from siddha_savor.models import Admin, Doctor, InviteLink, Patient
from siddha_savor.models.doctor import DOCTOR_APPROVED
from siddha_savor.models.patient import PATIENT_APPROVED, PATIENT_PENDING
from siddha_savor.services import email_service


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class FakeSMTP:
    """Stands in for smtplib.SMTP and records every message it is asked to send."""

    def __init__(self, outbox, fail=False):
        self.outbox = outbox
        self.fail = fail

    def __call__(self, host, port):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def sendmail(self, sender, to, raw):
        if self.fail:
            raise ConnectionError('SMTP unavailable')
        self.outbox.append({'to': to, 'message': email.message_from_string(raw)})


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    sent = []
    monkeypatch.setattr(email_service.smtplib, 'SMTP', FakeSMTP(sent))
    return sent


def _message_text(entry):
    for part in entry['message'].walk():
        if part.get_content_type() == 'text/plain':
            return part.get_payload(decode=True).decode('utf-8')
    return ''


@pytest.fixture
def message_text():
    """Decoded plain-text part of a recorded message."""
    return _message_text


@pytest.fixture
def admin(app):
    admin = Admin(name='Site Admin', email='admin@siddhasavor.com')
    admin.set_password('admin123')
    db.session.add(admin)
    db.session.commit()
    return admin


@pytest.fixture
def doctor(app):
    doctor = Doctor(uid='DOC001', name='Dr. Meena', email='meena@clinic.test', status=DOCTOR_APPROVED)
    doctor.set_password('doctor123')
    db.session.add(doctor)
    db.session.commit()
    return doctor


@pytest.fixture
def make_patient(app, doctor):
    def _make(email='patient@example.com', status=PATIENT_PENDING, diagnosis=None,
              token='abc', doctor_uid=None, password='patient123', name='Kavya'):
        patient = Patient(
            name=name,
            email=email,
            diagnosis=diagnosis,
            status=status,
            invite_token=token if status == PATIENT_PENDING else None,
            registration_token=token,
            doctor_uid=doctor_uid or doctor.uid,
        )
        patient.set_password(password)
        db.session.add(patient)
        db.session.commit()
        return patient
    return _make


@pytest.fixture
def approved_patient(make_patient):
    return make_patient(email='approved@example.com', status=PATIENT_APPROVED, diagnosis='Hypertension')


@pytest.fixture
def make_invite(app, doctor):
    def _make(role='PATIENT', expires_in=timedelta(days=7), is_used=False, token=None, doctor_uid='default'):
        invite = InviteLink(
            token=token or f"invite-{InviteLink.query.count() + 1}",
            role=role,
            doctor_uid=doctor.uid if doctor_uid == 'default' else doctor_uid,
            created_by=doctor.uid,
            is_used=is_used,
            expires_at=datetime.utcnow() + expires_in,
        )
        db.session.add(invite)
        db.session.commit()
        return invite
    return _make


def _auth_headers(identity, claims):
    token = create_access_token(identity=str(identity), additional_claims=claims)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin):
    return _auth_headers(admin.id, {'role': 'admin', 'email': admin.email})


@pytest.fixture
def doctor_headers(doctor):
    return _auth_headers(doctor.id, {'role': 'doctor', 'email': doctor.email, 'doctor_uid': doctor.uid})


@pytest.fixture
def patient_headers(approved_patient):
    return _auth_headers(approved_patient.id, {
        'role': 'patient',
        'email': approved_patient.email,
        'doctor_uid': approved_patient.doctor_uid,
    })

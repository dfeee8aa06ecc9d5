from datetime import datetime

from siddha_savor.extensions import db

ROLE_PATIENT = 'PATIENT'
ROLE_DOCTOR = 'DOCTOR'
INVITE_ROLES = (ROLE_PATIENT, ROLE_DOCTOR)


class InviteLink(db.Model):
    __tablename__ = 'invite_links'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False)  # PATIENT, DOCTOR
    doctor_uid = db.Column(db.String(20), nullable=True, index=True)
    created_by = db.Column(db.String(50), nullable=True)  # doctor uid or 'ADMIN'
    recipient_email = db.Column(db.String(120), nullable=True)
    recipient_name = db.Column(db.String(200), nullable=True)
    is_used = db.Column(db.Boolean, default=False, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'token': self.token,
            'role': self.role,
            'doctor_uid': self.doctor_uid,
            'created_by': self.created_by,
            'recipient_email': self.recipient_email,
            'recipient_name': self.recipient_name,
            'is_used': self.is_used,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<InviteLink {self.role} {self.token[:8]}...>"

from siddha_savor.extensions import db
from .base import TimestampMixin, PasswordMixin

DOCTOR_PENDING = 'PENDING'
DOCTOR_APPROVED = 'APPROVED'
DOCTOR_REJECTED = 'REJECTED'
DOCTOR_STATUSES = (DOCTOR_PENDING, DOCTOR_APPROVED, DOCTOR_REJECTED)


class Doctor(db.Model, TimestampMixin, PasswordMixin):
    __tablename__ = 'doctors'

    id = db.Column(db.Integer, primary_key=True)
    uid = db.Column(db.String(20), unique=True, nullable=False, index=True)  # e.g., DOC001
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(20))
    medical_license = db.Column(db.String(100))
    clinic_name = db.Column(db.String(200))

    # Possible values: 'PENDING', 'APPROVED', 'REJECTED'
    status = db.Column(db.String(20), nullable=False, default=DOCTOR_PENDING, index=True)

    patients = db.relationship('Patient', backref='doctor', lazy='dynamic')

    @staticmethod
    def next_uid():
        """DOC001, DOC002, ... based on the highest existing id"""
        last = Doctor.query.order_by(Doctor.id.desc()).first()
        return f"DOC{(last.id if last else 0) + 1:03d}"

    def to_dict(self):
        return {
            'id': self.id,
            'uid': self.uid,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'medical_license': self.medical_license,
            'clinic_name': self.clinic_name,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Doctor {self.uid} {self.name} - {self.status}>"

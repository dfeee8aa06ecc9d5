from siddha_savor.extensions import db
from .base import TimestampMixin, PasswordMixin

PATIENT_PENDING = 'PENDING'
PATIENT_APPROVED = 'APPROVED'

DIAGNOSIS_OPTIONS = (
    'Hypertension',
    'Hemorrhoids',
    'Anemia',
    'Diabetes Mellitus',
)


class Patient(db.Model, TimestampMixin, PasswordMixin):
    __tablename__ = 'patients'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(20))

    # One of DIAGNOSIS_OPTIONS, set by the treating doctor
    diagnosis = db.Column(db.String(50), nullable=True, index=True)

    # Possible values: 'PENDING', 'APPROVED'
    status = db.Column(db.String(20), nullable=False, default=PATIENT_PENDING, index=True)
    # Set while awaiting approval, cleared on approve; "deactivated_..." after a deactivation
    invite_token = db.Column(db.String(128), nullable=True, index=True)
    # Token the patient registered with; never cleared
    registration_token = db.Column(db.String(128), nullable=True)

    doctor_uid = db.Column(db.String(20), db.ForeignKey('doctors.uid'), nullable=True, index=True)

    @property
    def is_pending(self):
        return self.status == PATIENT_PENDING

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'diagnosis': self.diagnosis,
            'status': self.status,
            'doctor_uid': self.doctor_uid,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Patient {self.name} ({self.id}) - {self.status}>"

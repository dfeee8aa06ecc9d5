from siddha_savor.extensions import db
from .base import TimestampMixin


class PasswordReset(db.Model, TimestampMixin):
    __tablename__ = 'password_resets'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), nullable=False, index=True)
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    code = db.Column(db.String(6), nullable=False)
    user_role = db.Column(db.String(20), nullable=False)  # admin, doctor, patient
    # Account id and display name, so the reset can complete without re-querying
    data = db.Column(db.JSON, nullable=False, default=dict)
    is_used = db.Column(db.Boolean, default=False, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<PasswordReset {self.email} used={self.is_used}>"

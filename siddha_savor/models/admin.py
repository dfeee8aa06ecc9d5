from siddha_savor.extensions import db
from .base import TimestampMixin, PasswordMixin


class Admin(db.Model, TimestampMixin, PasswordMixin):
    __tablename__ = 'admins'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
        }

    def __repr__(self):
        return f"<Admin {self.email}>"

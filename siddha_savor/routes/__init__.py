from .auth import auth_bp
from .doctor import doctor_bp
from .patient import patient_bp
from .admin import admin_bp
from .reminders import reminders_bp
from .health import health_bp

__all__ = ['auth_bp', 'doctor_bp', 'patient_bp', 'admin_bp', 'reminders_bp', 'health_bp']

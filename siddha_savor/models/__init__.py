from .admin import Admin
from .doctor import Doctor
from .patient import Patient
from .invite_link import InviteLink
from .password_reset import PasswordReset
from .audit_log import AuditLog

__all__ = ["Admin", "Doctor", "Patient", "InviteLink", "PasswordReset", "AuditLog"]

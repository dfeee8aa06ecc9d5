from .email_service import (
    send_email,
    send_patient_approved_email,
    send_patient_rejected_email,
    send_patient_deactivated_email,
    send_patient_reapproved_email,
    send_invite_email,
    send_password_reset_code_email,
    send_meal_reminder_email,
)

from .invite_service import (
    create_invite,
    invite_status,
    validate_invite,
    list_invite_summaries,
    cleanup_expired_invites,
)

from .password_reset_service import (
    create_password_reset,
    request_password_reset,
    verify_reset_token,
    mark_code_verified,
    claim_reset_token,
    reset_password,
    cleanup_expired_tokens,
    get_reset_stats,
)

from .doctor_service import (
    register_doctor,
    list_doctors,
    approve_doctor,
    reject_doctor,
)

from .patient_service import (
    approve_patient,
    reject_patient,
    deactivate_patient,
    reapprove_patient,
    register_patient,
    set_patient_diagnosis,
    list_patients,
    patient_diet_plan,
    get_patient_diet_plan,
)

from .meal_reminder_service import (
    compose_reminder,
    deliver_with_retry,
    send_one,
    send_test_reminder,
    dispatch,
    meal_type_for_time,
)

__all__ = [
    # Email Services
    "send_email",
    "send_patient_approved_email",
    "send_patient_rejected_email",
    "send_patient_deactivated_email",
    "send_patient_reapproved_email",
    "send_invite_email",
    "send_password_reset_code_email",
    "send_meal_reminder_email",
    # Invites
    "create_invite",
    "invite_status",
    "validate_invite",
    "list_invite_summaries",
    "cleanup_expired_invites",
    # Password Resets
    "create_password_reset",
    "request_password_reset",
    "verify_reset_token",
    "mark_code_verified",
    "claim_reset_token",
    "reset_password",
    "cleanup_expired_tokens",
    "get_reset_stats",
    # Doctors
    "register_doctor",
    "list_doctors",
    "approve_doctor",
    "reject_doctor",
    # Patient Lifecycle
    "approve_patient",
    "reject_patient",
    "deactivate_patient",
    "reapprove_patient",
    "register_patient",
    "set_patient_diagnosis",
    "list_patients",
    "patient_diet_plan",
    "get_patient_diet_plan",
    # Meal Reminders
    "compose_reminder",
    "deliver_with_retry",
    "send_one",
    "send_test_reminder",
    "dispatch",
    "meal_type_for_time",
]

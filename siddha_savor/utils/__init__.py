from .decorators import require_role, require_cron_secret, handle_errors, current_identity

from .validation import json_body, text_field, full_name

from .audit import log_audit

from .tokens import (
    generate_token,
    generate_reset_code,
    status_of,
    hours_remaining,
)

from .timing import OperationTimer, timer_from_config

__all__ = [
    # Decorators
    "require_role",
    "require_cron_secret",
    "handle_errors",
    "current_identity",
    # Request validation
    "json_body",
    "text_field",
    "full_name",
    # Audit
    "log_audit",
    # Tokens
    "generate_token",
    "generate_reset_code",
    "status_of",
    "hours_remaining",
    # Timing
    "OperationTimer",
    "timer_from_config",
]

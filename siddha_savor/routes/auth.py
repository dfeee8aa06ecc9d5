from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    jwt_required,
    get_jwt_identity,
    get_jwt,
    verify_jwt_in_request,
)
import logging

from siddha_savor.extensions import db
from siddha_savor.exceptions import InvalidTokenError
from siddha_savor.models import Admin, Doctor, Patient
from siddha_savor.models.doctor import DOCTOR_APPROVED, DOCTOR_PENDING
from siddha_savor.models.invite_link import ROLE_PATIENT
from siddha_savor.services import (
    register_doctor,
    register_patient,
    request_password_reset,
    verify_reset_token,
    mark_code_verified,
    reset_password,
)
from siddha_savor.services.invite_service import build_invite_url, validate_invite
from siddha_savor.utils.decorators import handle_errors
from siddha_savor.utils.validation import json_body, text_field

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

LOGIN_MODELS = {
    'admin': Admin,
    'doctor': Doctor,
    'patient': Patient,
}


@auth_bp.route('/login', methods=['POST'])
@handle_errors('login')
def login():
    """Login endpoint - authenticates an admin, doctor or patient and returns a JWT"""
    data = json_body()
    email = text_field(data.get('email'), 'email').lower()
    password = text_field(data.get('password'), 'password', strip=False)
    role = text_field(data.get('role'), 'role').lower()

    if not email or not password:
        return jsonify({
            'success': False,
            'error': 'Email and password required'
        }), 400

    model = LOGIN_MODELS.get(role)
    if model is None:
        return jsonify({
            'success': False,
            'error': f'Role must be one of: {", ".join(LOGIN_MODELS)}'
        }), 400

    user = model.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return jsonify({
            'success': False,
            'error': 'Invalid email or password'
        }), 401

    if role == 'doctor' and user.status != DOCTOR_APPROVED:
        error = ('Your account is awaiting admin approval'
                 if user.status == DOCTOR_PENDING else 'Your account has been rejected')
        return jsonify({'success': False, 'error': error}), 403

    if role == 'patient' and user.is_pending:
        return jsonify({
            'success': False,
            'error': 'Your registration is pending doctor approval'
        }), 403

    # Identity must be a string for the JWT "sub" claim
    additional_claims = {
        "role": role,
        "email": user.email,
        "name": user.name,
    }
    if role == 'doctor':
        additional_claims["doctor_uid"] = user.uid
    elif role == 'patient':
        additional_claims["doctor_uid"] = user.doctor_uid

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims=additional_claims,
    )
    logger.info(f"Login: {role} {email}")

    data = user.to_dict()
    data['role'] = role
    return jsonify({
        'success': True,
        'data': data,
        'access_token': access_token,
        'token_type': 'bearer',
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Stateless JWT: the client drops its token. Always succeeds."""
    try:
        verify_jwt_in_request(optional=True)
        identity = get_jwt_identity()
        if identity:
            logger.info(f"Logout: {get_jwt().get('role')} {identity}")
    except Exception as e:
        logger.warning(f"Logout with unusable token: {e}")

    return jsonify({
        'success': True,
        'message': 'Logged out successfully'
    }), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_user():
    """Get the logged-in account using the JWT"""
    role = get_jwt().get('role')
    model = LOGIN_MODELS.get(role)
    user = db.session.get(model, int(get_jwt_identity())) if model else None

    if not user:
        return jsonify({'success': False, 'error': 'User not found'}), 404

    data = user.to_dict()
    data['role'] = role
    return jsonify({'success': True, 'data': data}), 200


@auth_bp.route('/validate-token', methods=['GET'])
@handle_errors('validate_token')
def validate_token():
    """
    Check an invite token before showing the registration form.
    Query: ?token=<invite token>
    """
    token = request.args.get('token')
    if not token:
        return jsonify({
            'success': False,
            'error': 'Token is required'
        }), 400

    try:
        invite = validate_invite(token)
    except InvalidTokenError as e:
        return jsonify({'success': False, 'error': e.message}), 404

    data = {
        'role': invite.role,
        'doctor_uid': invite.doctor_uid if invite.role == ROLE_PATIENT else None,
        'recipient_email': invite.recipient_email,
        'recipient_name': invite.recipient_name,
        'expires_at': invite.expires_at.isoformat(),
        'invite_url': build_invite_url(invite.token),
    }
    return jsonify({'success': True, 'data': data}), 200


@auth_bp.route('/register-patient', methods=['POST'])
@handle_errors('register_patient')
def register_patient_route():
    """
    Body: { "token", "name" | "firstName"+"lastName", "email", "password", "phone", "diagnosis" }
    """
    data = json_body()
    token = text_field(data.get('token'), 'token')
    if not token:
        return jsonify({
            'success': False,
            'error': 'Registration token is required'
        }), 400

    patient = register_patient(token, data)
    return jsonify({
        'success': True,
        'data': {'id': patient.id, 'email': patient.email, 'status': patient.status},
        'message': 'Registration successful! Your registration is pending doctor approval.'
    }), 201


@auth_bp.route('/register-doctor', methods=['POST'])
@handle_errors('register_doctor')
def register_doctor_route():
    """
    Body: { "token", "name" | "firstName"+"lastName", "email", "password",
            "phone", "medicalLicense", "clinicName" }
    """
    data = json_body()
    token = text_field(data.get('token'), 'token')
    if not token:
        return jsonify({
            'success': False,
            'error': 'Registration token is required'
        }), 400

    doctor = register_doctor(token, data)
    return jsonify({
        'success': True,
        'data': {'id': doctor.id, 'uid': doctor.uid, 'email': doctor.email, 'status': doctor.status},
        'message': 'Registration successful! Your account is awaiting admin approval.'
    }), 201


@auth_bp.route('/forgot-password', methods=['POST'])
@handle_errors('forgot_password')
def forgot_password():
    """
    Step 1: Request password reset.
    Body: { "email": "user@example.com" }
    Always returns success (does not leak whether email exists).
    """
    data = json_body()
    token = request_password_reset(data.get('email'))

    return jsonify({
        'success': True,
        'message': 'If this email exists, a verification code has been sent.',
        'token': token
    }), 200


@auth_bp.route('/verify-reset-code', methods=['POST'])
@handle_errors('verify_reset_code')
def verify_reset_code():
    """
    Step 2: Check the emailed code without consuming it.
    Body: { "token": "...", "code": "123456" }
    """
    data = json_body()
    token = text_field(data.get('token'), 'token')
    code = data.get('code')
    if not token or not code:
        return jsonify({
            'success': False,
            'error': 'Token and code are required'
        }), 400

    reset = verify_reset_token(token, code)
    mark_code_verified(reset, request.remote_addr)

    return jsonify({
        'success': True,
        'message': 'Code verified. You can now set a new password.'
    }), 200


@auth_bp.route('/reset-password', methods=['POST'])
@handle_errors('reset_password')
def reset_password_route():
    """
    Step 3: Set the new password.
    Body: { "token", "code", "newPassword", "confirmPassword" }
    """
    data = json_body()
    token = text_field(data.get('token'), 'token')
    code = data.get('code')
    new_password = text_field(data.get('newPassword'), 'newPassword', strip=False)
    confirm_password = text_field(data.get('confirmPassword'), 'confirmPassword', strip=False)

    if not token or not code or not new_password:
        return jsonify({
            'success': False,
            'error': 'Token, code and new password are required'
        }), 400

    if new_password != confirm_password:
        return jsonify({
            'success': False,
            'error': 'Passwords do not match'
        }), 400

    min_length = current_app.config.get('PASSWORD_MIN_LENGTH', 6)
    if len(new_password) < min_length:
        return jsonify({
            'success': False,
            'error': f'Password must be at least {min_length} characters'
        }), 400

    reset_password(token, code, new_password)

    return jsonify({
        'success': True,
        'message': 'Password has been reset successfully. You can now log in.'
    }), 200

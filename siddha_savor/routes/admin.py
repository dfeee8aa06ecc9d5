from flask import Blueprint, request, jsonify
import logging

from siddha_savor.models import Doctor
from siddha_savor.models.invite_link import ROLE_DOCTOR
from siddha_savor.services import (
    list_doctors,
    approve_doctor,
    reject_doctor,
    list_patients,
    approve_patient,
    reject_patient,
    create_invite,
    list_invite_summaries,
    cleanup_expired_invites,
    cleanup_expired_tokens,
    get_reset_stats,
)
from siddha_savor.utils.decorators import current_identity, handle_errors, require_role
from siddha_savor.utils.validation import json_body, text_field

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def _actor():
    _, _, claims = current_identity()
    return f"ADMIN:{claims.get('email')}"


# ── Doctors ──────────────────────────────────────────────────────────────────

@admin_bp.route("/doctors", methods=["GET"])
@require_role("admin")
@handle_errors("list_doctors")
def get_doctors():
    """List doctors. Query: ?status=PENDING|APPROVED|REJECTED"""
    doctors = list_doctors(status=request.args.get("status"))
    return jsonify({
        "success": True,
        "data": [d.to_dict() for d in doctors],
        "message": f"Found {len(doctors)} doctor(s)",
    }), 200


@admin_bp.route("/doctors/<int:doctor_id>/approve", methods=["POST"])
@require_role("admin")
@handle_errors("approve_doctor")
def approve_doctor_route(doctor_id):
    doctor = approve_doctor(doctor_id, actor=_actor())
    return jsonify({"success": True, "message": f"Doctor {doctor.uid} approved"}), 200


@admin_bp.route("/doctors/<int:doctor_id>/reject", methods=["POST"])
@require_role("admin")
@handle_errors("reject_doctor")
def reject_doctor_route(doctor_id):
    doctor = reject_doctor(doctor_id, actor=_actor())
    return jsonify({"success": True, "message": f"Doctor {doctor.uid} rejected"}), 200


# ── Patients ─────────────────────────────────────────────────────────────────

@admin_bp.route("/patients", methods=["GET"])
@require_role("admin")
@handle_errors("list_patients")
def get_patients():
    patients = list_patients(status=request.args.get("status"))
    return jsonify({"success": True, "data": [p.to_dict() for p in patients]}), 200


@admin_bp.route("/patients/<int:patient_id>/approve", methods=["POST"])
@require_role("admin")
@handle_errors("admin_approve_patient")
def approve_patient_route(patient_id):
    changed = approve_patient(patient_id, actor=_actor())
    return jsonify({
        "success": True,
        "message": "Patient approved successfully" if changed else "Patient is already approved",
    }), 200


@admin_bp.route("/patients/<int:patient_id>/reject", methods=["POST"])
@require_role("admin")
@handle_errors("admin_reject_patient")
def reject_patient_route(patient_id):
    """Body: { "reason": "..." }"""
    data = json_body()
    reject_patient(patient_id, data.get("reason"), actor=_actor())
    return jsonify({"success": True, "message": "Patient rejected and removed"}), 200


# ── Invites ──────────────────────────────────────────────────────────────────

@admin_bp.route("/invites", methods=["POST"])
@require_role("admin")
@handle_errors("admin_create_invite")
def create_invite_route():
    """
    Body: { "role": "PATIENT" | "DOCTOR", "doctorUID"?: "DOC001",
            "recipientEmail"?: "...", "recipientName"?: "..." }
    """
    data = json_body()
    role = text_field(data.get("role"), "role").upper()
    doctor_uid = data.get("doctorUID") if role != ROLE_DOCTOR else None

    if doctor_uid and not Doctor.query.filter_by(uid=doctor_uid).first():
        return jsonify({"success": False, "error": f"Doctor {doctor_uid} not found"}), 400

    invite, invite_url = create_invite(
        doctor_uid,
        role,
        created_by="ADMIN",
        recipient_email=text_field(data.get("recipientEmail"), "recipientEmail"),
        recipient_name=text_field(data.get("recipientName"), "recipientName"),
    )
    return jsonify({
        "success": True,
        "data": {"invite": invite.to_dict(), "inviteUrl": invite_url},
    }), 201


@admin_bp.route("/invites/debug", methods=["GET"])
@require_role("admin")
@handle_errors("debug_invites")
def debug_invites():
    """Newest invite links with derived status and time left."""
    limit = request.args.get("limit", 10, type=int)
    summaries = list_invite_summaries(limit=max(1, min(limit, 100)))
    return jsonify({
        "success": True,
        "data": summaries,
        "message": f"Showing {len(summaries)} most recent invite(s)",
    }), 200


@admin_bp.route("/invites/cleanup", methods=["POST"])
@require_role("admin")
@handle_errors("cleanup_invites")
def cleanup_invites():
    deleted = cleanup_expired_invites()
    return jsonify({
        "success": True,
        "data": {"deletedInvites": deleted},
        "message": f"Removed {deleted} expired invite(s)",
    }), 200


# ── Password resets ──────────────────────────────────────────────────────────

@admin_bp.route("/password-reset-cleanup", methods=["POST"])
@require_role("admin")
@handle_errors("password_reset_cleanup")
def password_reset_cleanup():
    cleaned = cleanup_expired_tokens()
    stats = get_reset_stats()
    return jsonify({
        "success": True,
        "data": {"cleanedTokens": cleaned, "stats": stats},
        "message": f"Cleaned up {cleaned} expired token(s)",
    }), 200


@admin_bp.route("/password-reset-cleanup", methods=["GET"])
@require_role("admin")
@handle_errors("password_reset_stats")
def password_reset_stats():
    return jsonify({"success": True, "data": get_reset_stats()}), 200

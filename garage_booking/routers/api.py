"""
JSON API over the same services as the screens.

Tokens are optional: requests without one act as a guest.
"""
from dataclasses import asdict

from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from garage_booking.errors import StoreError, ValidationError
from garage_booking.models import ServiceTier
from garage_booking.routers import garage

router = Blueprint("api", __name__, url_prefix="/api")


def token_user_id():
    identity = get_jwt_identity()
    return int(identity) if identity is not None else None


def json_body():
    """The request body as a dict; a missing body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def not_found(message="Booking not found"):
    return jsonify({"success": False, "message": message, "error_type": "not_found"}), 404


# ==================== ERROR HANDLERS ====================

@router.errorhandler(ValidationError)
def handle_validation_error(error):
    return jsonify({
        "success": False,
        "message": str(error),
        "error_type": "validation_error",
    }), 400


@router.errorhandler(StoreError)
def handle_store_error(error):
    return jsonify({
        "success": False,
        "message": str(error),
        "error_type": "store_error",
    }), 500


# ==================== SYSTEM ====================

@router.route("/system/health", methods=["GET"])
def health_check():
    connected = garage().repository.ping()
    return jsonify({
        "status": "healthy" if connected else "unhealthy",
        "database": "connected" if connected else "disconnected",
    }), 200 if connected else 500


# ==================== AUTHENTICATION ====================

@router.route("/auth/login", methods=["POST"])
def login():
    data = json_body()
    user = garage().authenticate(data.get("username"), data.get("password"))
    if user is None:
        return jsonify({"success": False, "message": "Invalid username or password"}), 401

    access_token = create_access_token(identity=str(user.id), additional_claims={"name": user.name})
    return jsonify({
        "success": True,
        "message": "Login successful",
        "access_token": access_token,
        "user": asdict(user),
    }), 200


@router.route("/auth/register", methods=["POST"])
def register():
    user_id = garage().register(json_body())
    return jsonify({"success": True, "message": "Account created successfully", "data": {"id": user_id}}), 201


@router.route("/auth/me", methods=["GET"])
@jwt_required()
def me():
    user = garage().profile(token_user_id())
    if user is None:
        return not_found("User not found")
    return jsonify({"success": True, "data": user.to_dict()}), 200


# ==================== BOOKINGS ====================

@router.route("/bookings", methods=["GET"])
@jwt_required(optional=True)
def list_bookings():
    bookings = garage().history(search=request.args.get("q"), user_id=token_user_id())
    return jsonify({
        "success": True,
        "count": len(bookings),
        "data": [booking.to_dict() for booking in bookings],
    }), 200


@router.route("/bookings", methods=["POST"])
@jwt_required(optional=True)
def create_booking():
    result = garage().create_booking(json_body(), user_id=token_user_id())
    message = "Booking created successfully"
    if result.email_error:
        message = "Booking created, but confirmation email failed."
    return jsonify({
        "success": True,
        "message": message,
        "data": {"id": result.booking_id, "cost": result.cost},
        "email": {"sent": result.email_sent, "details": result.email_error},
    }), 201


@router.route("/bookings/<int:booking_id>", methods=["GET"])
@jwt_required(optional=True)
def get_booking(booking_id):
    booking = garage().booking(booking_id)
    if booking is None:
        return not_found()
    return jsonify({"success": True, "data": booking.to_dict()}), 200


@router.route("/bookings/<int:booking_id>/status", methods=["PATCH"])
@jwt_required(optional=True)
def update_status(booking_id):
    data = json_body()
    if not garage().update_status(booking_id, data.get("status")):
        return not_found()
    return jsonify({"success": True, "message": "Status updated successfully"}), 200


@router.route("/bookings/<int:booking_id>", methods=["DELETE"])
@jwt_required(optional=True)
def delete_booking(booking_id):
    if not garage().delete_booking(booking_id):
        return not_found()
    return jsonify({"success": True, "message": "Booking deleted successfully"}), 200


@router.route("/dashboard", methods=["GET"])
@jwt_required(optional=True)
def dashboard():
    stats, recent = garage().dashboard(user_id=token_user_id())
    return jsonify({
        "success": True,
        "data": {
            **stats.model_dump(),
            "recent_bookings": [booking.to_dict() for booking in recent],
        },
    }), 200


@router.route("/quote", methods=["GET"])
def quote():
    vehicle = request.args.get("vehicle", "")
    premium = request.args.get("tier") == ServiceTier.PREMIUM.value
    return jsonify({"success": True, "data": {"cost": garage().quote(vehicle, premium)}}), 200


# ==================== SETTINGS & FEEDBACK ====================

@router.route("/settings", methods=["GET"])
def get_settings():
    pricing = garage().pricing
    return jsonify({"success": True, "data": {**asdict(pricing.prices), **asdict(pricing.business)}}), 200


@router.route("/settings", methods=["PUT"])
def save_settings():
    form = garage().save_settings(json_body())
    return jsonify({"success": True, "message": "Settings saved successfully", "data": form.model_dump()}), 200


@router.route("/feedback", methods=["POST"])
def submit_feedback():
    data = json_body()
    saved = garage().submit_feedback(data.get("feedback"))
    return jsonify({"success": True, "message": "Feedback submitted.", "data": {"saved": saved}}), 201

"""
New booking, history, booking details, status update and delete screens.
"""
from datetime import datetime, timedelta

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for

from garage_booking.errors import StoreError, ValidationError
from garage_booking.models import ServiceTier, VehicleCategory
from garage_booking.routers import current_user_id, entry_required, garage
from garage_booking.services import BOOKING_STATUSES

router = Blueprint("bookings", __name__, url_prefix="/bookings")

APPOINTMENT_FORMAT = "%Y-%m-%d %H:%M"
SERVICE_DETAILS = [
    "Complete vehicle inspection",
    "Oil & filter change",
    "Brake system check",
    "Tire pressure & alignment",
    "30-day service warranty",
]


def default_appointment():
    return (datetime.now() + timedelta(days=1)).strftime(APPOINTMENT_FORMAT)


def render_form(form=None):
    form = form or {}
    vehicle = form.get("wheeler_type", VehicleCategory.TWO_WHEELER.value)
    premium = form.get("service_type") == ServiceTier.PREMIUM.value
    return render_template(
        "booking_form.html",
        form=form,
        vehicles=[category.value for category in VehicleCategory],
        tiers=[tier.value for tier in ServiceTier],
        appointment=form.get("appointment_date") or default_appointment(),
        cost=garage().quote(vehicle, premium),
        details=SERVICE_DETAILS,
    )


@router.route("/new", methods=["GET", "POST"])
@entry_required
def new_booking():
    if request.method == "GET":
        return render_form()

    try:
        result = garage().create_booking(request.form.to_dict(), user_id=current_user_id())
    except ValidationError as e:
        flash(str(e), "danger")
        return render_form(request.form)
    except StoreError as e:
        flash(f"Booking failed: {e}", "danger")
        return render_form(request.form)

    if result.email_error:
        flash(f"Booking saved but email failed: {result.email_error}", "warning")
    elif result.email_sent:
        flash("Booking successful! Confirmation email sent.", "success")
    else:
        flash("Booking created successfully!", "success")
    return redirect(url_for("bookings.new_booking"))


@router.route("/quote")
@entry_required
def quote():
    vehicle = request.args.get("vehicle", "")
    premium = request.args.get("tier") == ServiceTier.PREMIUM.value
    return jsonify({"vehicle": vehicle, "premium": premium, "cost": garage().quote(vehicle, premium)})


@router.route("")
@entry_required
def history():
    search = request.args.get("q", "")
    bookings = garage().history(search=search, user_id=current_user_id())
    return render_template("history.html", bookings=bookings, search=search, statuses=BOOKING_STATUSES)


@router.route("/<int:booking_id>")
@entry_required
def detail(booking_id):
    booking = garage().booking(booking_id)
    if booking is None:
        flash("Booking not found.", "danger")
        return redirect(url_for("bookings.history"))
    return render_template("booking_detail.html", booking=booking, statuses=BOOKING_STATUSES)


@router.route("/<int:booking_id>/status", methods=["POST"])
@entry_required
def update_status(booking_id):
    try:
        updated = garage().update_status(booking_id, request.form.get("status", ""))
    except (ValidationError, StoreError) as e:
        flash(f"Update failed: {e}", "danger")
        return redirect(url_for("bookings.history"))

    if updated:
        flash("Status updated successfully!", "success")
    else:
        flash("Booking not found.", "danger")
    return redirect(url_for("bookings.history"))


@router.route("/<int:booking_id>/delete", methods=["POST"])
@entry_required
def delete(booking_id):
    try:
        deleted = garage().delete_booking(booking_id)
    except StoreError as e:
        flash(f"Delete failed: {e}", "danger")
        return redirect(url_for("bookings.history"))

    if deleted:
        flash("Booking deleted successfully!", "success")
    else:
        flash("Booking not found.", "danger")
    return redirect(url_for("bookings.history"))

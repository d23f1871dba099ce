"""
Single-form booking screen with a customer feedback box.

No login is involved; bookings made here carry no user reference.
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from garage_booking.errors import StoreError, ValidationError
from garage_booking.models import ServiceTier, VehicleCategory
from garage_booking.routers import garage

router = Blueprint("quick", __name__, url_prefix="/quick")


def render_page(form=None):
    form = form or {}
    vehicle = form.get("wheeler_type", VehicleCategory.TWO_WHEELER.value)
    return render_template(
        "quick.html",
        form=form,
        vehicles=[category.value for category in VehicleCategory],
        cost=garage().quote(vehicle, bool(form.get("premium"))),
    )


@router.route("", methods=["GET", "POST"])
def book():
    if request.method == "GET":
        return render_page()

    data = {
        "name": request.form.get("name"),
        "email": request.form.get("email"),
        "wheeler_type": request.form.get("wheeler_type", VehicleCategory.TWO_WHEELER.value),
        "service_type": ServiceTier.PREMIUM.value if request.form.get("premium") else ServiceTier.STANDARD.value,
    }
    try:
        result = garage().create_booking(data)
    except ValidationError:
        flash("Please enter Name and Email.", "danger")
        return render_page(request.form)
    except StoreError as e:
        flash(f"Database Error: {e}", "danger")
        return render_page(request.form)

    if result.email_error:
        flash(f"Booking saved successfully! (Email sending failed: {result.email_error})", "warning")
    elif result.email_sent:
        flash("Booking successful! Confirmation email sent.", "success")
    else:
        flash(
            f"Booking successful! Name: {data['name']}, Vehicle: {data['wheeler_type']}, "
            f"Cost: Rs.{result.cost:.2f}",
            "success",
        )
    return redirect(url_for("quick.book"))


@router.route("/feedback", methods=["POST"])
def feedback():
    try:
        garage().submit_feedback(request.form.get("feedback"))
    except ValidationError as e:
        flash(str(e), "danger")
        return redirect(url_for("quick.book"))

    flash("Feedback submitted.", "success")
    return redirect(url_for("quick.book"))

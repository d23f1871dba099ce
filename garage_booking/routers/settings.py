"""
Pricing and business information settings screen.
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from garage_booking.errors import StoreError, ValidationError
from garage_booking.routers import entry_required, garage

router = Blueprint("settings", __name__, url_prefix="/settings")


@router.route("", methods=["GET", "POST"])
@entry_required
def edit():
    if request.method == "POST":
        try:
            garage().save_settings(request.form.to_dict())
        except ValidationError as e:
            flash(str(e), "danger")
            return render_template("settings.html", form=request.form)
        except StoreError as e:
            flash(f"Failed to save settings: {e}", "danger")
            return render_template("settings.html", form=request.form)

        flash("Settings saved successfully!", "success")
        return redirect(url_for("settings.edit"))

    return render_template("settings.html", form=garage().pricing.as_settings())

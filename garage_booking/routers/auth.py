"""
Login, registration, guest entry, logout and profile screens.
"""
from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for

from garage_booking.errors import StoreError, ValidationError
from garage_booking.routers import current_user_id, enter_application, entry_required, garage

router = Blueprint("auth", __name__)


@router.route("/login", methods=["GET", "POST"])
def login():
    if session.get("entered"):
        return redirect(url_for("dashboard.index"))

    if request.method == "POST":
        username = request.form.get("username", "")
        try:
            user = garage().authenticate(username, request.form.get("password", ""))
        except ValidationError as e:
            flash(str(e), "danger")
            return render_template("login.html", username=username)
        except StoreError as e:
            flash(f"Login failed: {e}", "danger")
            return render_template("login.html", username=username)

        if user is None:
            flash("Invalid username or password", "danger")
            return render_template("login.html", username=username)

        enter_application(user.id, user.name)
        current_app.logger.info("User %s logged in", username)
        return redirect(url_for("dashboard.index"))

    return render_template("login.html")


@router.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        try:
            garage().register(request.form.to_dict())
        except ValidationError as e:
            flash(str(e), "danger")
            return render_template("register.html", form=request.form)
        except StoreError as e:
            flash(f"Registration failed: {e}", "danger")
            return render_template("register.html", form=request.form)

        flash("Account created successfully! Please login.", "success")
        return redirect(url_for("auth.login"))

    return render_template("register.html", form={})


@router.route("/guest", methods=["POST"])
def guest():
    enter_application()
    return redirect(url_for("dashboard.index"))


@router.route("/logout", methods=["POST"])
def logout():
    session.clear()
    flash("Logged out.", "info")
    return redirect(url_for("auth.login"))


@router.route("/profile")
@entry_required
def profile():
    user = garage().profile(current_user_id())
    return render_template("profile.html", user=user.to_dict() if user is not None else None)

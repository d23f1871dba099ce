"""
Flask blueprints for the booking screens and the JSON API.
"""
from functools import wraps

from flask import current_app, flash, redirect, session, url_for

EXTENSION_KEY = "garage_booking"


def garage():
    """The application's :class:`GarageService`."""
    return current_app.extensions[EXTENSION_KEY]


def current_user_id():
    return session.get("user_id")


def enter_application(user_id=None, user_name="Guest"):
    session.clear()
    session["entered"] = True
    session["user_id"] = user_id
    session["user_name"] = user_name


def entry_required(view):
    """Keep logged-out visitors on the login screen."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("entered"):
            flash("Please login or continue as guest.", "warning")
            return redirect(url_for("auth.login"))
        return view(*args, **kwargs)
    return wrapper

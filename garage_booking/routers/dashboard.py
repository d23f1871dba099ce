"""
Dashboard screen.
"""
from flask import Blueprint, render_template

from garage_booking.routers import current_user_id, entry_required, garage

router = Blueprint("dashboard", __name__)


@router.route("/")
@entry_required
def index():
    stats, recent = garage().dashboard(user_id=current_user_id())
    return render_template("dashboard.html", stats=stats, recent=recent)

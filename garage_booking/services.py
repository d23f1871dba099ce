"""
Application services: validate input, price it, persist it, notify.

The screens and the JSON API both go through :class:`GarageService`, so the
whole booking flow can be exercised without a browser.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pydantic

from garage_booking.errors import ConfigurationError, EmailError, ValidationError
from garage_booking.mailer import CONFIRMATION_SUBJECT, booking_confirmation
from garage_booking.models import Booking, BookingStatus, User
from garage_booking.pricing import PricingConfig
from garage_booking.schemas import BookingCreate, BookingStats, LoginRequest, SettingsUpdate, StatusUpdate, UserCreate

logger = logging.getLogger(__name__)

RECENT_BOOKINGS_LIMIT = 10
BOOKING_STATUSES = [status.value for status in BookingStatus]


def validate(schema, data, message: Optional[str] = None):
    """Build ``schema`` from ``data``, raising our ValidationError on failure."""
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        if message is None:
            message = e.errors()[0]["msg"].removeprefix("Value error, ")
        raise ValidationError(message) from e


@dataclass
class CurrentUser:
    id: int
    name: str


@dataclass
class BookingResult:
    booking_id: int
    cost: float
    email_sent: bool = False
    email_error: Optional[str] = None


class GarageService:
    """Everything a screen can ask of the garage, minus the rendering."""

    def __init__(self, repository, pricing: PricingConfig, notifier, hasher, email_enabled=False):
        self.repository = repository
        self.pricing = pricing
        self.notifier = notifier
        self.hasher = hasher
        self.email_enabled = email_enabled

    # ==================== PRICING & SETTINGS ====================

    def load_pricing(self):
        self.pricing.load(self.repository.all_settings())

    def quote(self, vehicle_category, premium: bool) -> float:
        return self.pricing.cost(vehicle_category, premium)

    def save_settings(self, data) -> SettingsUpdate:
        """
        Persist the seven settings keys one statement at a time, then apply
        them to the in-process pricing. A store failure part way through
        leaves the earlier keys written and the in-process pricing untouched.
        """
        form = validate(SettingsUpdate, data, "Please enter valid numbers for costs and discount")
        for key, value in form.model_dump().items():
            self.repository.put_setting(key, str(value))
        self.pricing.update(form.price_table(), form.business_info())
        return form

    # ==================== BOOKINGS ====================

    def create_booking(self, data, user_id: Optional[int] = None) -> BookingResult:
        form = validate(BookingCreate, data)
        cost = self.quote(form.wheeler_type, form.premium)

        booking_id = self.repository.add_booking(
            user_id=user_id,
            name=form.name,
            email=form.email,
            phone=form.phone or None,
            wheeler_type=form.wheeler_type,
            service_type=form.service_type.value,
            cost=cost,
            appointment_date=form.appointment_date or None,
            notes=form.notes or None,
        )
        logger.info("Booking %s created for %s (%s, Rs. %.2f)", booking_id, form.name, form.wheeler_type, cost)

        result = BookingResult(booking_id=booking_id, cost=cost)
        if self.email_enabled:
            self._send_confirmation(form, cost, result)
        return result

    def _send_confirmation(self, form: BookingCreate, cost: float, result: BookingResult):
        service = form.service_type.value + (" ⭐" if form.premium else "")
        body = booking_confirmation(
            form.name, form.wheeler_type, service, form.appointment_date, cost,
            business=self.pricing.business,
        )
        try:
            self.notifier.send_email(form.email, CONFIRMATION_SUBJECT, body)
            result.email_sent = True
        except (EmailError, ConfigurationError) as e:
            # The booking stays; only the notification is reported as failed.
            logger.warning("Booking %s saved but email failed: %s", result.booking_id, e)
            result.email_error = str(e)

    def history(self, search: Optional[str] = None, user_id: Optional[int] = None) -> List[Booking]:
        search = (search or "").strip() or None
        return self.repository.list_bookings(search=search, user_id=user_id)

    def booking(self, booking_id: int) -> Optional[Booking]:
        return self.repository.get_booking(booking_id)

    def dashboard(self, user_id: Optional[int] = None) -> Tuple[BookingStats, List[Booking]]:
        stats = self.repository.statistics(user_id=user_id)
        recent = self.repository.list_bookings(user_id=user_id, limit=RECENT_BOOKINGS_LIMIT)
        return stats, recent

    def update_status(self, booking_id: int, status) -> bool:
        form = validate(StatusUpdate, {"status": status}, f"Unknown status: {status}")
        return self.repository.update_status(booking_id, form.status)

    def delete_booking(self, booking_id: int) -> bool:
        return self.repository.delete_booking(booking_id)

    # ==================== FEEDBACK ====================

    def submit_feedback(self, text) -> bool:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Enter feedback first.")
        return self.repository.add_feedback(text)

    # ==================== USERS ====================

    def register(self, data) -> int:
        form = validate(UserCreate, data)
        password_hash = self.hasher.generate_password_hash(form.password).decode("utf-8")
        return self.repository.add_user(
            username=form.username,
            password_hash=password_hash,
            full_name=form.full_name,
            email=(form.email or "").strip() or None,
            phone=(form.phone or "").strip() or None,
        )

    def authenticate(self, username, password) -> Optional[CurrentUser]:
        form = validate(LoginRequest, {"username": username, "password": password})
        user = self.repository.find_user(form.username)
        if user is None:
            return None
        try:
            matched = self.hasher.check_password_hash(user.password_hash, form.password)
        except ValueError as e:
            # Rows written before hashing hold plaintext, which bcrypt cannot parse.
            logger.warning("Stored password for %s is not a bcrypt hash: %s", form.username, e)
            return None
        if not matched:
            return None
        return CurrentUser(id=user.id, name=user.full_name)

    def profile(self, user_id) -> Optional[User]:
        if user_id is None:
            return None
        return self.repository.get_user(user_id)


"""
Persistence gateway for bookings, users, feedback and settings.

Each method opens a session, issues a single statement and closes the
session again. Reads degrade to empty results when the store is unreachable;
writes raise :class:`StoreError` with the driver's message.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import case, delete, func, insert, or_, select, text, update
from sqlalchemy.exc import SQLAlchemyError

from garage_booking.database import create_session_factory
from garage_booking.errors import StoreError
from garage_booking.models import Booking, BookingStatus, Feedback, Setting, User
from garage_booking.schemas.booking import BookingStats

logger = logging.getLogger(__name__)


def _driver_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class GarageRepository:
    """Single-statement data access over a connection-per-call engine."""

    def __init__(self, engine):
        self.engine = engine
        self.Session = create_session_factory(engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database unreachable: %s", e)
            return False

    # ==================== BOOKINGS ====================

    def add_booking(self, *, name, email, wheeler_type, service_type, cost,
                    phone=None, appointment_date=None, notes=None, user_id=None) -> int:
        booking = Booking(
            user_id=user_id,
            name=name,
            email=email,
            phone=phone,
            wheeler_type=wheeler_type,
            service_type=service_type,
            cost=cost,
            appointment_date=appointment_date,
            notes=notes,
            status=BookingStatus.PENDING.value,
        )
        try:
            with self.Session() as session:
                session.add(booking)
                session.commit()
                return booking.id
        except SQLAlchemyError as e:
            logger.error("Booking insert failed: %s", e)
            raise StoreError(_driver_message(e)) from e

    def list_bookings(self, search: Optional[str] = None, user_id: Optional[int] = None,
                      limit: Optional[int] = None) -> List[Booking]:
        query = select(Booking)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                Booking.name.like(pattern),
                Booking.email.like(pattern),
                Booking.phone.like(pattern),
                Booking.wheeler_type.like(pattern),
            ))
        if user_id is not None:
            query = query.where(Booking.user_id == user_id)
        query = query.order_by(Booking.booking_date.desc(), Booking.id.desc())
        if limit:
            query = query.limit(limit)

        try:
            with self.Session() as session:
                return list(session.scalars(query).all())
        except SQLAlchemyError as e:
            logger.error("Could not load bookings: %s", e)
            return []

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        try:
            with self.Session() as session:
                return session.get(Booking, booking_id)
        except SQLAlchemyError as e:
            logger.error("Could not load booking %s: %s", booking_id, e)
            return None

    def update_status(self, booking_id: int, status) -> bool:
        status = BookingStatus(status).value
        try:
            with self.Session() as session:
                result = session.execute(
                    update(Booking).where(Booking.id == booking_id).values(status=status)
                )
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Status update failed for booking %s: %s", booking_id, e)
            raise StoreError(_driver_message(e)) from e

    def delete_booking(self, booking_id: int) -> bool:
        try:
            with self.Session() as session:
                result = session.execute(delete(Booking).where(Booking.id == booking_id))
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Delete failed for booking %s: %s", booking_id, e)
            raise StoreError(_driver_message(e)) from e

    def statistics(self, user_id: Optional[int] = None) -> BookingStats:
        query = select(
            func.count(Booking.id),
            func.sum(case((Booking.status == BookingStatus.PENDING.value, 1), else_=0)),
            func.sum(case((Booking.status == BookingStatus.COMPLETED.value, 1), else_=0)),
            func.sum(Booking.cost),
        )
        if user_id is not None:
            query = query.where(Booking.user_id == user_id)

        try:
            with self.Session() as session:
                total, pending, completed, revenue = session.execute(query).one()
        except SQLAlchemyError as e:
            logger.error("Could not load statistics: %s", e)
            return BookingStats()

        return BookingStats(
            total=int(total or 0),
            pending=int(pending or 0),
            completed=int(completed or 0),
            revenue=float(revenue or 0),
        )

    # ==================== FEEDBACK ====================

    def add_feedback(self, text: str) -> bool:
        try:
            with self.Session() as session:
                session.add(Feedback(feedback_text=text))
                session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("Could not save feedback: %s", e)
            return False

    # ==================== USERS ====================

    def add_user(self, *, username, password_hash, full_name, email=None, phone=None) -> int:
        user = User(
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            email=email,
            phone=phone,
        )
        try:
            with self.Session() as session:
                session.add(user)
                session.commit()
                return user.id
        except SQLAlchemyError as e:
            logger.error("Registration failed for %s: %s", username, e)
            raise StoreError(_driver_message(e)) from e

    def find_user(self, username: str) -> Optional[User]:
        """Look up a user by exact username; raises StoreError if unreachable."""
        try:
            with self.Session() as session:
                return session.scalars(
                    select(User).where(User.username == username).limit(1)
                ).first()
        except SQLAlchemyError as e:
            logger.error("Login lookup failed: %s", e)
            raise StoreError(_driver_message(e)) from e

    def get_user(self, user_id: int) -> Optional[User]:
        try:
            with self.Session() as session:
                return session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Could not load user %s: %s", user_id, e)
            return None

    # ==================== SETTINGS ====================

    def get_setting(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            with self.Session() as session:
                value = session.scalar(
                    select(Setting.setting_value).where(Setting.setting_key == key)
                )
        except SQLAlchemyError as e:
            logger.error("Could not read setting %s: %s", key, e)
            return default
        return default if value is None else value

    def all_settings(self) -> Dict[str, str]:
        try:
            with self.Session() as session:
                rows = session.execute(select(Setting.setting_key, Setting.setting_value)).all()
        except SQLAlchemyError as e:
            logger.error("Could not load settings: %s", e)
            return {}
        return {key: value for key, value in rows}

    def put_setting(self, key: str, value: str):
        """Insert or overwrite one setting."""
        try:
            with self.Session() as session:
                session.execute(self._upsert_setting(self.engine.dialect.name, key, value))
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Could not save setting %s: %s", key, e)
            raise StoreError(_driver_message(e)) from e

    @staticmethod
    def _upsert_setting(dialect_name, key, value):
        row = {"setting_key": key, "setting_value": value}
        if dialect_name == "mysql":
            from sqlalchemy.dialects.mysql import insert as mysql_insert
            stmt = mysql_insert(Setting).values(**row)
            return stmt.on_duplicate_key_update(setting_value=stmt.inserted.setting_value)
        if dialect_name in ("sqlite", "postgresql"):
            if dialect_name == "sqlite":
                from sqlalchemy.dialects.sqlite import insert as dialect_insert
            else:
                from sqlalchemy.dialects.postgresql import insert as dialect_insert
            stmt = dialect_insert(Setting).values(**row)
            return stmt.on_conflict_do_update(
                index_elements=[Setting.setting_key],
                set_={"setting_value": stmt.excluded.setting_value},
            )
        # TODO: add MERGE-based upserts for SQL Server and Oracle.
        return insert(Setting).values(**row)

import unittest
from unittest import mock

from garage_booking.errors import EmailError, StoreError, ValidationError
from garage_booking.mailer import CONFIRMATION_SUBJECT
from garage_booking.pricing import PriceTable
from tests.support import AppTestMixin

BOOKING = {
    "name": "Asha Rao",
    "email": "asha@example.com",
    "phone": "9000000001",
    "wheeler_type": "4 Wheeler",
    "service_type": "Premium",
    "appointment_date": "2026-10-19 10:00",
    "notes": "",
}

SETTINGS = {
    "two_wheeler_cost": "600",
    "three_wheeler_cost": "800",
    "four_wheeler_cost": "1200",
    "premium_discount": "25",
    "business_name": "Speedy Motors",
    "business_email": "hello@speedy.example",
    "business_phone": "+91 9000000000",
}


class TestBookingService(AppTestMixin, unittest.TestCase):
    def test_create_booking_prices_and_stores(self):
        """Booking is priced and stored as Pending"""
        result = self.service.create_booking(BOOKING)
        booking = self.service.booking(result.booking_id)
        self.assertAlmostEqual(result.cost, 900.0)
        self.assertAlmostEqual(booking.cost, 900.0)
        self.assertEqual(booking.status, "Pending")
        self.assertIsNone(booking.notes)
        self.assertFalse(result.email_sent)
        self.assertIsNone(result.email_error)

    def test_name_and_email_required(self):
        """Blank name or email stores nothing"""
        for missing in ("name", "email"):
            data = dict(BOOKING, **{missing: "   "})
            with self.assertRaises(ValidationError) as caught:
                self.service.create_booking(data)
            self.assertEqual(str(caught.exception), "Name and Email are required!")
        self.assertEqual(self.service.history(), [])

    def test_email_failure_keeps_the_booking(self):
        """A failed email leaves the booking in place"""
        self.service.email_enabled = True
        with mock.patch.object(self.service.notifier, "send_email",
                               side_effect=EmailError("Email send failed: Connection refused")):
            result = self.service.create_booking(BOOKING)
        self.assertFalse(result.email_sent)
        self.assertEqual(result.email_error, "Email send failed: Connection refused")
        self.assertIsNotNone(self.service.booking(result.booking_id))

    def test_email_sent_when_enabled(self):
        """Confirmation email goes to the customer"""
        self.service.email_enabled = True
        with mock.patch.object(self.service.notifier, "send_email") as send_email:
            result = self.service.create_booking(BOOKING)
        self.assertTrue(result.email_sent)
        to, subject, body = send_email.call_args[0]
        self.assertEqual(to, "asha@example.com")
        self.assertEqual(subject, CONFIRMATION_SUBJECT)
        self.assertIn("Total Cost: Rs. 900.00", body)

    def test_store_failure_sends_no_email(self):
        """No email when the insert fails"""
        self.service.email_enabled = True
        with mock.patch.object(self.repository, "add_booking", side_effect=StoreError("disk full")), \
                mock.patch.object(self.service.notifier, "send_email") as send_email:
            with self.assertRaises(StoreError):
                self.service.create_booking(BOOKING)
        send_email.assert_not_called()

    def test_history_search_and_dashboard(self):
        """History search and dashboard figures"""
        self.service.create_booking(BOOKING)
        self.service.create_booking(dict(BOOKING, name="Vikram", email="vik@example.com", phone="9111111111"))
        self.assertEqual(len(self.service.history("  ")), 2)
        self.assertEqual([b.name for b in self.service.history("Vikram")], ["Vikram"])

        stats, recent = self.service.dashboard()
        self.assertEqual(stats.total, 2)
        self.assertEqual(stats.pending, 2)
        self.assertEqual(len(recent), 2)

    def test_dashboard_shows_ten_most_recent(self):
        """Dashboard keeps the ten newest bookings"""
        for i in range(12):
            self.service.create_booking(dict(BOOKING, name=f"Customer {i}"))
        stats, recent = self.service.dashboard()
        self.assertEqual(stats.total, 12)
        self.assertEqual(len(recent), 10)
        self.assertEqual(recent[0].name, "Customer 11")

    def test_update_status(self):
        """Status update and unknown status"""
        booking_id = self.service.create_booking(BOOKING).booking_id
        self.assertTrue(self.service.update_status(booking_id, "In Progress"))
        self.assertEqual(self.service.booking(booking_id).status, "In Progress")
        with self.assertRaises(ValidationError):
            self.service.update_status(booking_id, "Lost")

    def test_feedback(self):
        self.assertTrue(self.service.submit_feedback("Great work"))
        with self.assertRaises(ValidationError):
            self.service.submit_feedback("   ")


class TestSettingsService(AppTestMixin, unittest.TestCase):
    def test_save_settings_persists_and_reprices(self):
        """Saved settings are stored and priced"""
        self.service.save_settings(SETTINGS)
        self.assertAlmostEqual(self.service.quote("4 Wheeler", True), 900.0)
        self.assertEqual(self.repository.get_setting("business_name"), "Speedy Motors")
        self.assertEqual(self.service.pricing.business.business_phone, "+91 9000000000")

    def test_invalid_number_changes_nothing(self):
        """Invalid numbers leave store and pricing alone"""
        with self.assertRaises(ValidationError) as caught:
            self.service.save_settings(dict(SETTINGS, premium_discount="ten"))
        self.assertEqual(str(caught.exception), "Please enter valid numbers for costs and discount")
        self.assertEqual(self.repository.all_settings(), {})
        self.assertEqual(self.service.quote("2 Wheeler", False), 500.0)

    def test_non_finite_prices_rejected(self):
        """nan and inf are not prices"""
        for value in ("nan", "inf", "-inf"):
            with self.assertRaises(ValidationError):
                self.service.save_settings(dict(SETTINGS, two_wheeler_cost=value))
        self.assertEqual(self.repository.all_settings(), {})
        self.assertEqual(self.service.quote("2 Wheeler", False), 500.0)

    def test_price_change_does_not_touch_stored_cost(self):
        """Existing bookings keep their cost"""
        booking_id = self.service.create_booking(BOOKING).booking_id
        self.service.save_settings(SETTINGS)
        self.assertAlmostEqual(self.service.booking(booking_id).cost, 900.0)

    def test_pricing_reloaded_from_store(self):
        """Pricing reloads from stored settings"""
        self.service.save_settings(SETTINGS)
        self.service.pricing.update(prices=PriceTable())
        self.service.load_pricing()
        self.assertEqual(self.service.quote("3 Wheeler", False), 800.0)


class TestUserService(AppTestMixin, unittest.TestCase):
    ACCOUNT = {
        "username": "asha",
        "password": "s3cret pass",
        "confirm_password": "s3cret pass",
        "full_name": "Asha Rao",
        "email": "asha@example.com",
    }

    def test_register_then_authenticate(self):
        """Registered users can log in with a hashed password"""
        user_id = self.service.register(self.ACCOUNT)
        stored = self.repository.find_user("asha")
        self.assertNotEqual(stored.password_hash, "s3cret pass")

        user = self.service.authenticate("  asha ", "s3cret pass")
        self.assertEqual(user.id, user_id)
        self.assertEqual(user.name, "Asha Rao")

    def test_wrong_password_or_unknown_user(self):
        """Wrong password and unknown user both fail"""
        self.service.register(self.ACCOUNT)
        self.assertIsNone(self.service.authenticate("asha", "wrong"))
        self.assertIsNone(self.service.authenticate("nobody", "s3cret pass"))

    def test_blank_credentials(self):
        """Blank credentials are a validation error"""
        with self.assertRaises(ValidationError) as caught:
            self.service.authenticate("", "")
        self.assertEqual(str(caught.exception), "Please enter username and password")

    def test_password_confirmation_must_match(self):
        """Password confirmation must match"""
        with self.assertRaises(ValidationError) as caught:
            self.service.register(dict(self.ACCOUNT, confirm_password="other"))
        self.assertEqual(str(caught.exception), "Passwords do not match!")

    def test_plaintext_password_row_is_no_match(self):
        """A stored password that is not a bcrypt hash fails the login quietly"""
        self.repository.add_user(username="legacy", password_hash="plain123", full_name="Old Account")
        self.assertIsNone(self.service.authenticate("legacy", "plain123"))

    def test_profile(self):
        """Profile loads the stored user; guests have none"""
        user_id = self.service.register(self.ACCOUNT)
        user = self.service.profile(user_id)
        self.assertEqual(user.to_dict()["email"], "asha@example.com")
        self.assertIsNone(self.service.profile(None))
        self.assertIsNone(self.service.profile(user_id + 1))

    def test_duplicate_username(self):
        """Duplicate usernames are a store error"""
        self.service.register(self.ACCOUNT)
        with self.assertRaises(StoreError):
            self.service.register(self.ACCOUNT)


if __name__ == "__main__":
    unittest.main()

import os
import tempfile
import unittest
from unittest import mock

from sqlalchemy import create_engine, inspect

from garage_booking.main import main


class TestCommands(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.env_file = os.path.join(self.tmpdir.name, ".env")
        self.db_path = os.path.join(self.tmpdir.name, "garage.db")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_missing_database_config_fails(self):
        """Startup without database settings exits with 1"""
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(main(["init-db", "--env-file", self.env_file]), 1)

    def test_init_db_creates_tables(self):
        """init-db creates all four tables"""
        with open(self.env_file, "w", encoding="utf-8") as handle:
            handle.write(f"GARAGE_DB_URL=sqlite:///{self.db_path}\nGARAGE_DB_USER=garage\n")

        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(main(["init-db", "--env-file", self.env_file]), 0)

        engine = create_engine(f"sqlite:///{self.db_path}")
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        self.assertEqual(tables, {"GarageServiceBookings", "Users", "CustomerFeedback", "Settings"})

    def test_verify_smtp_without_credentials_fails(self):
        """verify-smtp exits with 1 when SMTP is not configured"""
        with open(self.env_file, "w", encoding="utf-8") as handle:
            handle.write(f"GARAGE_DB_URL=sqlite:///{self.db_path}\nGARAGE_DB_USER=garage\n")

        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(main(["verify-smtp", "--env-file", self.env_file]), 1)


if __name__ == "__main__":
    unittest.main()

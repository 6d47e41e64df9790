"""Tests for database functionality"""

import pytest
from core.database import BotDatabase

class TestBotDatabase:
    """Test database operations"""

    @pytest.fixture
    def temp_db(self, tmp_path):
        """Create temporary database for testing"""
        return BotDatabase(str(tmp_path / "chipsie_test.db"))

    def test_admins(self, temp_db):
        """Test admin set management"""
        assert not temp_db.is_admin("bob")

        temp_db.add_admin("bob")
        temp_db.add_admin("bob")
        assert temp_db.is_admin("bob")
        with temp_db.get_connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM admins").fetchone()[0] == 1

        temp_db.rem_admin("bob")
        temp_db.rem_admin("bob")
        assert not temp_db.is_admin("bob")

    def test_commands(self, temp_db):
        """Test dynamic command storage with upsert semantics"""
        assert not temp_db.cmd_exists("hello")
        assert temp_db.get_cmd_resp("hello") is None

        temp_db.add_cmd("hello", "Hi [username]")
        temp_db.add_cmd("bye", "Bye")
        assert temp_db.cmd_exists("hello")
        assert temp_db.get_cmd_resp("hello") == "Hi [username]"

        temp_db.add_cmd("hello", "Hey there")
        assert temp_db.get_cmd_resp("hello") == "Hey there"
        assert temp_db.cmd_exists("bye")
        with temp_db.get_connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM commands").fetchone()[0] == 2

        temp_db.rem_cmd("hello")
        temp_db.rem_cmd("missing")
        assert not temp_db.cmd_exists("hello")

    def test_quotes_survive(self, temp_db):
        """Templates with SQL-significant characters are stored verbatim"""
        template = "it's [username]'s turn; DROP TABLE commands; --"
        temp_db.add_cmd("quote", template)
        assert temp_db.get_cmd_resp("quote") == template

    def test_names_are_case_sensitive(self, temp_db):
        temp_db.add_cmd("Hello", "upper")
        assert not temp_db.cmd_exists("hello")

    def test_motd(self, temp_db):
        """Test message of the day defaults and updates"""
        assert temp_db.get_motd() == {'motd': '', 'rate': 20, 'enabled': False}

        temp_db.set_motd("Follow!")
        temp_db.set_motd_rate(5)
        temp_db.set_motd_enabled(True)
        assert temp_db.get_motd() == {'motd': 'Follow!', 'rate': 5, 'enabled': True}

    def test_persistence(self, tmp_path):
        """Data survives reopening the database"""
        path = str(tmp_path / "persist.db")
        db = BotDatabase(path)
        db.add_admin("bob")
        db.add_cmd("hello", "Hi")
        db.set_motd("kept")

        reopened = BotDatabase(path)
        assert reopened.is_admin("bob")
        assert reopened.get_cmd_resp("hello") == "Hi"
        assert reopened.get_motd()['motd'] == "kept"

    def test_command_usage(self, temp_db):
        """Test usage logging and statistics"""
        temp_db.log_command_usage("hello", "viewer", "mychan", execution_time_ms=3)
        temp_db.log_command_usage("hello", "viewer", "mychan", success=False, error="boom")
        temp_db.log_command_usage("addcmd", "mychan", "mychan")

        stats = temp_db.get_command_stats()
        assert stats[0]['command'] == "hello"
        assert stats[0]['usage_count'] == 2
        assert stats[0]['success_count'] == 1
        assert stats[0]['error_count'] == 1
        assert stats[1]['command'] == "addcmd"

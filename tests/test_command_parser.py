"""Tests for command detection in chat text"""

import pytest
from core.command_parser import parse_command, first_token, remainder_after_first, split_args

class TestParseCommand:
    """Test the trigger and name/argument split"""

    def test_bare_command(self):
        cmd = parse_command("!dice")
        assert cmd.name == "dice"
        assert cmd.arg_string == ""

    def test_plain_chat(self):
        assert parse_command("hello") is None
        assert parse_command("") is None
        assert parse_command("say !dice") is None

    def test_arguments(self):
        cmd = parse_command("  !dice 2 6")
        assert cmd.name == "dice"
        assert cmd.arg_string == "2 6"

    def test_argument_string_not_trimmed(self):
        cmd = parse_command("!addcmd   hello Hi there ")
        assert cmd.name == "addcmd"
        assert cmd.arg_string == "  hello Hi there "

    def test_tab_separator(self):
        cmd = parse_command("!dice\t20")
        assert cmd.name == "dice"
        assert cmd.arg_string == "20"

    def test_trigger_only(self):
        cmd = parse_command("!")
        assert cmd.name == ""
        assert cmd.arg_string == ""

    def test_name_is_case_preserved(self):
        assert parse_command("!AddAdmin bob").name == "AddAdmin"

    def test_custom_trigger(self):
        assert parse_command("!dice", trigger="~") is None
        assert parse_command("~dice", trigger="~").name == "dice"

class TestArgumentHelpers:
    """Test argument token helpers"""

    @pytest.mark.parametrize("text,expected", [
        ("bob", "bob"),
        ("   bob  extra", "bob"),
        ("", ""),
        ("    ", ""),
    ])
    def test_first_token(self, text, expected):
        assert first_token(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("hello Hi [username]!", "Hi [username]!"),
        ("  hello    Hi  there ", "Hi  there "),
        ("hello", ""),
        ("hello   ", ""),
        ("", ""),
    ])
    def test_remainder_after_first(self, text, expected):
        assert remainder_after_first(text) == expected

    def test_split_args(self):
        assert split_args("  a   b\tc ") == ["a", "b", "c"]

"""Tests for protocol line tokenizing and PRIVMSG extraction"""

import pytest
from core.exceptions import ParseError, ExtractError
from core.irc import ProtocolMessage, Cursor, tokenize, extract_invocation, extract_sender

class TestTokenize:
    """Test splitting raw lines into protocol messages"""

    def test_ping(self):
        msg = tokenize("PING :tmi.twitch.tv")
        assert msg.command == "PING"
        assert msg.parameters == ":tmi.twitch.tv"
        assert msg.tags is None
        assert msg.source is None

    def test_tags_and_source(self):
        line = ("@badge-info=;color=#FF0000;display-name=Alice "
                ":alice!alice@alice.tmi.twitch.tv PRIVMSG #mychan :hello world")
        msg = tokenize(line)
        assert msg.tags == "badge-info=;color=#FF0000;display-name=Alice"
        assert msg.source == "alice!alice@alice.tmi.twitch.tv"
        assert msg.command == "PRIVMSG"
        assert msg.parameters == "#mychan :hello world"

    def test_numeric_reply(self):
        msg = tokenize(":tmi.twitch.tv 001 chipsie :Welcome, GLHF!")
        assert msg.source == "tmi.twitch.tv"
        assert msg.command == "001"
        assert msg.parameters == "chipsie :Welcome, GLHF!"

    def test_command_without_parameters(self):
        msg = tokenize(":tmi.twitch.tv RECONNECT")
        assert msg.command == "RECONNECT"
        assert msg.parameters == ""

    def test_surrounding_whitespace(self):
        msg = tokenize("   PING   :tmi.twitch.tv")
        assert msg.command == "PING"
        assert msg.parameters == ":tmi.twitch.tv"

    def test_no_character_validation(self):
        msg = tokenize(":\x01weird\x02 ?!verb ünïcode params")
        assert msg.source == "\x01weird\x02"
        assert msg.command == "?!verb"
        assert msg.parameters == "ünïcode params"

    @pytest.mark.parametrize("line", ["", "   ", "\t \t"])
    def test_empty_line(self, line):
        with pytest.raises(ParseError) as exc:
            tokenize(line)
        assert exc.value.reason == ParseError.EMPTY_LINE

    @pytest.mark.parametrize("line", ["@a=1;b=2", "@a=1;b=2    "])
    def test_truncated_after_tags(self, line):
        with pytest.raises(ParseError) as exc:
            tokenize(line)
        assert exc.value.reason == ParseError.TRUNCATED_AFTER_TAGS

    @pytest.mark.parametrize("line", [":tmi.twitch.tv", "@a=1 :tmi.twitch.tv  "])
    def test_truncated_after_source(self, line):
        with pytest.raises(ParseError) as exc:
            tokenize(line)
        assert exc.value.reason == ParseError.TRUNCATED_AFTER_SOURCE

    @pytest.mark.parametrize("prefix", ["", "@a=1 ", ":nick!user@host ", "@a=1;b= :nick!user@host "])
    @pytest.mark.parametrize("suffix", [
        "PRIVMSG #mychan :hi there",
        "PING :tmi.twitch.tv",
        "JOIN #mychan",
        "376",
    ])
    def test_suffix_reconstruction(self, prefix, suffix):
        msg = tokenize(prefix + suffix)
        rebuilt = msg.command + (f" {msg.parameters}" if msg.parameters else "")
        assert rebuilt == suffix

class TestCursor:
    """Test the text cursor helpers"""

    def test_read_until_stops_before_delimiter(self):
        cursor = Cursor("abc def")
        assert cursor.read_until(" ") == "abc"
        assert cursor.peek() == " "

    def test_read_until_runs_to_end(self):
        cursor = Cursor("abc")
        assert cursor.read_until(" ") == "abc"
        assert cursor.exhausted
        assert cursor.peek() == ""

    def test_find_missing(self):
        assert Cursor("abc").find(":") is None

class TestExtractInvocation:
    """Test channel, sender and body extraction"""

    def test_channel_sender_body(self):
        msg = ProtocolMessage(
            command="PRIVMSG",
            parameters="#mychan :hello world",
            source="alice!alice@alice.tmi.twitch.tv"
        )
        chat = extract_invocation(msg)
        assert chat.channel == "mychan"
        assert chat.sender == "alice"
        assert chat.body == "hello world"
        assert chat.command_name is None
        assert not chat.is_command

    def test_body_keeps_later_colons(self):
        msg = ProtocolMessage(command="PRIVMSG", parameters="  #mychan :time is 12:30", source="a!a@a")
        assert extract_invocation(msg).body == "time is 12:30"

    def test_empty_body(self):
        msg = ProtocolMessage(command="PRIVMSG", parameters="#mychan :", source="a!a@a")
        assert extract_invocation(msg).body == ""

    def test_not_a_channel(self):
        msg = ProtocolMessage(command="PRIVMSG", parameters="chipsie :psst", source="a!a@a")
        with pytest.raises(ExtractError) as exc:
            extract_invocation(msg)
        assert exc.value.reason == ExtractError.NOT_CHANNEL_MESSAGE

    @pytest.mark.parametrize("parameters", ["#mychan", "#mychan hello", ""])
    def test_missing_body(self, parameters):
        msg = ProtocolMessage(command="PRIVMSG", parameters=parameters, source="a!a@a")
        with pytest.raises(ExtractError) as exc:
            extract_invocation(msg)
        expected = ExtractError.NOT_CHANNEL_MESSAGE if not parameters else ExtractError.NO_MESSAGE_BODY
        assert exc.value.reason == expected

    def test_body_colon_must_follow_channel(self):
        """The channel runs to the first space, so a colon inside it starts no body"""
        msg = ProtocolMessage(command="PRIVMSG", parameters="#mychan:text", source="a!a@a")
        with pytest.raises(ExtractError) as exc:
            extract_invocation(msg)
        assert exc.value.reason == ExtractError.NO_MESSAGE_BODY

    def test_colon_inside_channel_token_is_kept(self):
        msg = ProtocolMessage(command="PRIVMSG", parameters="#my:chan :hi", source="a!a@a")
        chat = extract_invocation(msg)
        assert chat.channel == "my:chan"
        assert chat.body == "hi"

    def test_source_without_nick_separator(self, caplog):
        msg = ProtocolMessage(command="PRIVMSG", parameters="#mychan :hi", source="tmi.twitch.tv")
        chat = extract_invocation(msg)
        assert chat.sender == ""
        assert chat.body == "hi"
        assert "Could not determine sender" in caplog.text

    def test_missing_source(self):
        assert extract_sender(None) == ""

"""
Integration tests for polycipher.

Tests:
- Interactive menu end to end
- Audit event logging of cipher operations
"""

import hashlib
import json

import pytest

from polycipher import main as cli
from polycipher.core_crypto.vigenere import encrypt, EmptyKeyError
from polycipher.integration.event_logger import (
    EventLogger, EventType, CipherEvent,
    get_key_hash, get_key_hash_short, create_event_logger
)


def feed_input(monkeypatch, *lines):
    """Make input() return the given lines in order."""
    answers = iter(lines)
    monkeypatch.setattr("builtins.input", lambda *args: next(answers))


class TestMenu:
    """End-to-end tests of the interactive menu."""

    def test_encrypt_flow(self, monkeypatch, capsys):
        """Choice 0 encrypts and prints the ciphertext."""
        feed_input(monkeypatch, "0", "Attack at dawn", "lemon")
        logger = EventLogger()

        status = cli.run_menu(logger)

        out = capsys.readouterr().out.splitlines()
        assert status == cli.EXIT_OK
        assert out == [
            "0: Encrypt",
            "1: Decrypt",
            "Enter the message to encrypt.",
            "Enter the key to encrypt.",
            "The ciphertext is:",
            "LXFOPVEFRNHR",
        ]
        assert len(logger.get_events_by_type(EventType.ENCRYPT)) == 1

    def test_decrypt_flow(self, monkeypatch, capsys):
        """Choice 1 decrypts and prints the plaintext."""
        feed_input(monkeypatch, "1", "LXFOPVEFRNHR", "LEMON")
        logger = EventLogger()

        status = cli.run_menu(logger)

        out = capsys.readouterr().out.splitlines()
        assert status == cli.EXIT_OK
        assert out[2] == "Enter the ciphertext to decrypt."
        assert out[3] == "Enter the key to decrypt."
        assert out[-2:] == ["The plaintext is:", "ATTACKATDAWN"]
        assert len(logger.get_events_by_type(EventType.DECRYPT)) == 1

    def test_choice_with_whitespace(self, monkeypatch, capsys):
        """Surrounding whitespace in the choice is ignored."""
        feed_input(monkeypatch, "  0 ", "hello", "aaa")
        assert cli.run_menu(EventLogger()) == cli.EXIT_OK
        assert capsys.readouterr().out.splitlines()[-1] == "HELLO"

    @pytest.mark.parametrize("choice", ["2", "-1", "encrypt", "", "0.5"])
    def test_invalid_option(self, monkeypatch, capsys, choice):
        """Anything other than 0 or 1 is an invalid option."""
        feed_input(monkeypatch, choice)
        logger = EventLogger()

        status = cli.run_menu(logger)

        out = capsys.readouterr().out.splitlines()
        assert status == cli.EXIT_INVALID_OPTION
        assert out[-1] == "Invalid option!!!"
        assert len(logger.get_events_by_type(EventType.INVALID_OPTION)) == 1

    def test_empty_key_reported(self, monkeypatch, capsys):
        """A letterless key prints an error instead of a result."""
        feed_input(monkeypatch, "0", "hello", "123")
        logger = EventLogger()

        status = cli.run_menu(logger)

        out = capsys.readouterr().out
        assert status == cli.EXIT_CIPHER_ERROR
        assert "Error:" in out
        assert "The ciphertext is:" not in out

        failures = logger.get_events_by_type(EventType.OPERATION_FAILED)
        assert len(failures) == 1
        assert failures[0].details == {
            'operation': 'encrypt',
            'error': 'EmptyKeyError',
        }

    def test_session_events(self, monkeypatch, capsys):
        """A run starts and ends a session."""
        feed_input(monkeypatch, "0", "hello", "key")
        logger = EventLogger()
        cli.run_menu(logger)

        types = [e.event_type for e in logger.get_all_events()]
        assert types == [EventType.SESSION_START, EventType.ENCRYPT, EventType.SESSION_END]

    def test_main_creates_logger(self, monkeypatch, capsys):
        """main() runs the menu with its own logger."""
        feed_input(monkeypatch, "1", "RIJVS", "key")
        assert cli.main() == cli.EXIT_OK
        assert capsys.readouterr().out.splitlines()[-1] == "HELLO"


class TestEventLogging:
    """Integration tests for audit event logging."""

    def test_key_hash_uses_normalized_key(self):
        """Keys that encrypt identically hash identically."""
        assert get_key_hash("lemon") == get_key_hash("L-E-M-O-N")
        assert get_key_hash("lemon") != get_key_hash("melon")
        assert len(get_key_hash("lemon")) == 64
        assert get_key_hash_short("lemon") == get_key_hash("lemon")[:16]

    def test_known_sha256(self):
        """Key hash is plain SHA-256 of the normalized key."""
        expected = hashlib.sha256(b"ABC").hexdigest()
        assert get_key_hash("a b c") == expected

    def test_encrypt_event_details(self):
        """Encrypt events record counts, not text."""
        logger = EventLogger()
        ciphertext = encrypt("attack at dawn", "lemon")
        event = logger.log_encrypt("lemon", "attack at dawn", ciphertext)

        assert event.event_type == EventType.ENCRYPT
        assert event.details['input_letters'] == 12
        assert event.details['output_letters'] == 12
        assert event.details['key_length'] == 5
        assert len(event.details['output_id']) == 16

    def test_get_key_events(self):
        """Events can be filtered by key."""
        logger = EventLogger()
        logger.log_encrypt("lemon", "a", encrypt("a", "lemon"))
        logger.log_decrypt("LEMON", "L", "A")
        logger.log_encrypt("other", "a", encrypt("a", "other"))

        assert len(logger.get_key_events("lemon")) == 2
        assert len(logger.get_key_events("other")) == 1
        assert logger.get_key_events("unused") == []

    def test_failure_without_key(self):
        """Failures may be logged without a key."""
        logger = EventLogger()
        event = logger.log_failure("decrypt", EmptyKeyError("no letters"))
        assert event.key_hash == "none"

    def test_max_events_caps_records(self):
        """Oldest records are dropped beyond max_events."""
        logger = EventLogger(max_events=3)
        for i in range(5):
            logger.log_invalid_option(str(i + 2))

        assert logger.event_count == 3
        choices = [e.details['choice'] for e in logger.get_all_events()]
        assert choices == ["4", "5", "6"]

    def test_invalid_max_events(self):
        """max_events must be positive."""
        with pytest.raises(ValueError):
            EventLogger(max_events=0)

    def test_recent_events(self):
        """get_recent_events returns the tail."""
        logger = create_event_logger()
        for i in range(4):
            logger.log_invalid_option(str(i))
        recent = logger.get_recent_events(2)
        assert [e.details['choice'] for e in recent] == ["2", "3"]

    def test_callbacks(self):
        """Callbacks see every new event; failing callbacks are ignored."""
        logger = EventLogger()
        seen = []

        def broken(event):
            raise RuntimeError("callback failure")

        logger.add_callback(broken)
        logger.add_callback(seen.append)
        logger.log_invalid_option("9")
        logger.remove_callback(seen.append)
        logger.log_invalid_option("8")

        assert len(seen) == 1
        assert seen[0].event_type == EventType.INVALID_OPTION
        assert logger.event_count == 3

    def test_record_roundtrip(self):
        """Records parse back into equivalent events."""
        event = CipherEvent(
            event_type=EventType.DECRYPT,
            key_hash=get_key_hash("lemon"),
            timestamp=1700000000,
            details={'input_letters': 3},
        )
        parsed = CipherEvent.from_record(event.to_record())
        assert parsed.event_type == EventType.DECRYPT
        assert parsed.key_hash == get_key_hash_short("lemon")
        assert parsed.timestamp == 1700000000
        assert parsed.details == {'input_letters': 3}
        assert "decrypt" in str(parsed)

    def test_export_import(self):
        """Exported logs can be imported with all events intact."""
        logger = EventLogger()
        logger.log_encrypt("lemon", "attack", encrypt("attack", "lemon"))
        logger.log_session_end()

        exported = logger.export_log()
        assert isinstance(json.loads(exported), list)

        imported = EventLogger.import_log(exported)
        # Import starts a new session on top of the old records
        assert imported.event_count == logger.event_count + 1
        assert len(imported.get_key_events("lemon")) == 1

    def test_import_rejects_bad_json(self):
        """Malformed audit logs are rejected."""
        with pytest.raises(ValueError):
            EventLogger.import_log('{"not": "a list"}')
        with pytest.raises(ValueError):
            EventLogger.import_log("not json")

    def test_print_audit_log(self, capsys):
        """Audit log prints one line per event plus details."""
        logger = EventLogger()
        logger.log_invalid_option("7")
        logger.print_audit_log()

        out = capsys.readouterr().out
        assert "CIPHER AUDIT LOG" in out
        assert "invalid_option" in out
        assert "choice: 7" in out
        assert "Total events: 2" in out

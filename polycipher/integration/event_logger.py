"""
Event Logger Module

Audit trail for cipher operations. Every encrypt, decrypt and failed
operation is recorded as a compact JSON record.

Features:
- Encrypt / decrypt events
- Failed operation and invalid menu option events
- Privacy-preserving key hashes (SHA-256)
- Export / import of the audit log as JSON

Messages and keys are never stored in plaintext: keys are identified by the
SHA-256 hash of their normalized form, outputs by a short digest.
"""

import time
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable

from cryptography.hazmat.primitives import hashes

from ..core_crypto.vigenere import normalize


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
DEFAULT_MAX_EVENTS = 1000  # Oldest records are dropped beyond this
SYSTEM_KEY_HASH = "system"
NO_KEY_HASH = "none"


# ============================================================================
# Privacy Functions
# ============================================================================

def sha256_hex(data: bytes) -> str:
    """Hex-encoded SHA-256 digest of data."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize().hex()


def get_key_hash(key: str) -> str:
    """
    Compute privacy-preserving hash of a key.

    The key is normalized first, so "lemon" and "L-E-M-O-N" (which encrypt
    identically) produce the same hash. This allows correlating events for
    the same key without ever storing it.

    Args:
        key: The plaintext key

    Returns:
        Hex-encoded SHA-256 hash of the normalized key
    """
    return sha256_hex(normalize(key).encode())


def get_key_hash_short(key: str) -> str:
    """First 16 characters of the key hash, for display and storage."""
    return get_key_hash(key)[:16]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of events that can be logged."""

    # Cipher events
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    OPERATION_FAILED = "operation_failed"

    # Menu events
    INVALID_OPTION = "invalid_option"

    # System events
    SESSION_START = "session_start"
    SESSION_END = "session_end"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class CipherEvent:
    """
    Represents a cipher event to be logged.

    key_hash is always a hash (or a fixed marker), never the key itself.
    """
    event_type: EventType
    key_hash: str  # SHA-256 hash of normalized key
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Convert event to a JSON record string."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'key': self.key_hash[:16],
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_record(cls, record: str) -> 'CipherEvent':
        """Parse event from a JSON record string."""
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            key_hash=data['key'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"key:{self.key_hash[:8]}..."
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory audit logger for cipher operations.

    Events are stored as JSON records in the order they were logged.
    """

    def __init__(
        self,
        max_events: int = DEFAULT_MAX_EVENTS,
        records: Optional[List[str]] = None
    ):
        """
        Initialize the event logger.

        Args:
            max_events: Maximum number of records kept
            records: Optional existing records to continue from

        Raises:
            ValueError: If max_events is not positive
        """
        if max_events < 1:
            raise ValueError("max_events must be at least 1")

        self._max_events = max_events
        self._records: List[str] = list(records) if records else []
        self._callbacks: List[Callable[[CipherEvent], None]] = []

        self._log_system_event(EventType.SESSION_START)

    def _log_system_event(self, event_type: EventType) -> CipherEvent:
        """Log a system event (no key)."""
        event = CipherEvent(
            event_type=event_type,
            key_hash=SYSTEM_KEY_HASH,
            timestamp=int(time.time()),
            details={'node': 'polycipher'}
        )
        self._add_event(event)
        return event

    def _add_event(self, event: CipherEvent) -> None:
        """Append event record, dropping the oldest past max_events."""
        self._records.append(event.to_record())
        if len(self._records) > self._max_events:
            del self._records[:len(self._records) - self._max_events]

        # Notify callbacks
        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # Don't let callbacks break logging

    def add_callback(self, callback: Callable[[CipherEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[CipherEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Cipher Events
    # ========================================================================

    def _log_operation(
        self,
        event_type: EventType,
        key: str,
        message: str,
        output: str
    ) -> CipherEvent:
        event = CipherEvent(
            event_type=event_type,
            key_hash=get_key_hash(key),
            timestamp=int(time.time()),
            details={
                'input_letters': len(normalize(message)),
                'output_letters': len(output),
                'key_length': len(normalize(key)),
                'output_id': sha256_hex(output.encode())[:16],
            }
        )
        self._add_event(event)
        return event

    def log_encrypt(self, key: str, message: str, output: str) -> CipherEvent:
        """
        Log an encryption.

        Args:
            key: The key used (will be hashed)
            message: The plaintext (only its letter count is kept)
            output: The ciphertext (only a short digest is kept)

        Returns:
            The logged event
        """
        return self._log_operation(EventType.ENCRYPT, key, message, output)

    def log_decrypt(self, key: str, message: str, output: str) -> CipherEvent:
        """Log a decryption."""
        return self._log_operation(EventType.DECRYPT, key, message, output)

    def log_failure(
        self,
        operation: str,
        error: Exception,
        key: Optional[str] = None
    ) -> CipherEvent:
        """
        Log a failed cipher operation.

        Args:
            operation: "encrypt" or "decrypt"
            error: The exception that was raised
            key: Optional key (will be hashed)

        Returns:
            The logged event
        """
        event = CipherEvent(
            event_type=EventType.OPERATION_FAILED,
            key_hash=get_key_hash(key) if key is not None else NO_KEY_HASH,
            timestamp=int(time.time()),
            details={
                'operation': operation,
                'error': type(error).__name__,
            }
        )
        self._add_event(event)
        return event

    def log_invalid_option(self, choice: str) -> CipherEvent:
        """Log an unrecognized menu choice."""
        event = CipherEvent(
            event_type=EventType.INVALID_OPTION,
            key_hash=NO_KEY_HASH,
            timestamp=int(time.time()),
            details={'choice': choice[:20]}
        )
        self._add_event(event)
        return event

    def log_session_end(self) -> CipherEvent:
        """Log the end of a session."""
        return self._log_system_event(EventType.SESSION_END)

    # ========================================================================
    # Retrieval
    # ========================================================================

    @property
    def event_count(self) -> int:
        """Number of records currently held."""
        return len(self._records)

    def get_all_events(self) -> List[CipherEvent]:
        """
        Retrieve all logged events.

        Returns:
            List of events, oldest first
        """
        events = []
        for record in self._records:
            try:
                events.append(CipherEvent.from_record(record))
            except (json.JSONDecodeError, KeyError, ValueError):
                pass  # Skip foreign records
        return events

    def get_key_events(self, key: str) -> List[CipherEvent]:
        """
        Get all events for a specific key.

        Args:
            key: The key to search for

        Returns:
            List of events recorded with that key
        """
        key_hash_short = get_key_hash_short(key)
        return [
            e for e in self.get_all_events()
            if e.key_hash == key_hash_short
        ]

    def get_events_by_type(self, event_type: EventType) -> List[CipherEvent]:
        """Get all events of a specific type."""
        return [
            e for e in self.get_all_events()
            if e.event_type == event_type
        ]

    def get_recent_events(self, count: int = 10) -> List[CipherEvent]:
        """Get the most recent events."""
        events = self.get_all_events()
        return events[-count:] if len(events) > count else events

    def print_audit_log(self, last_n: Optional[int] = None) -> None:
        """Print the audit log in a readable format."""
        events = self.get_all_events()
        if last_n:
            events = events[-last_n:]

        print("\n" + "=" * 70)
        print("CIPHER AUDIT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            if event.details:
                for k, v in event.details.items():
                    print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {self.event_count}")
        print("=" * 70)

    def export_log(self) -> str:
        """Export the entire audit log as a JSON array of records."""
        return json.dumps(self._records)

    @classmethod
    def import_log(cls, json_str: str, max_events: int = DEFAULT_MAX_EVENTS) -> 'EventLogger':
        """
        Import an audit log from JSON.

        Raises:
            ValueError: If json_str is not a JSON array of strings
        """
        records = json.loads(json_str)
        if not isinstance(records, list) or not all(isinstance(r, str) for r in records):
            raise ValueError("Audit log must be a JSON array of records")
        return cls(max_events=max_events, records=records)


# ============================================================================
# Convenience Functions
# ============================================================================

def create_event_logger(max_events: int = DEFAULT_MAX_EVENTS) -> EventLogger:
    """Create a new event logger."""
    return EventLogger(max_events=max_events)


# ============================================================================
# Self-Test
# ============================================================================

def _run_tests():
    """Run a quick self-test of the event logger."""
    from ..core_crypto.vigenere import encrypt

    print("Event Logger Test")
    print("=" * 70)

    tests_passed = 0
    tests_total = 0

    def test(name: str, condition: bool, details: str = ""):
        nonlocal tests_passed, tests_total
        tests_total += 1
        status = "✓ PASS" if condition else "✗ FAIL"
        print(f"\n[Test {tests_total}] {name}")
        if details:
            print(f"  {details}")
        print(f"  Status: {status}")
        if condition:
            tests_passed += 1
        return condition

    key_hash = get_key_hash("lemon")
    test(
        "Privacy: SHA-256 key hash",
        len(key_hash) == 64 and key_hash == get_key_hash("L-E-M-O-N"),
        f"Key 'lemon' → Hash: {key_hash[:32]}..."
    )

    logger = EventLogger()
    ciphertext = encrypt("attack at dawn", "lemon")
    event = logger.log_encrypt("lemon", "attack at dawn", ciphertext)
    test(
        "Log ENCRYPT event",
        event.event_type == EventType.ENCRYPT and logger.event_count == 2,
        f"Event: {event}"
    )

    exported = logger.export_log()
    test(
        "Privacy: No plaintext key or message in log",
        "lemon" not in exported.lower() and "attack" not in exported.lower(),
    )

    imported = EventLogger.import_log(exported)
    test(
        "Export/Import audit log",
        len(imported.get_key_events("lemon")) == 1,
        f"Imported records: {imported.event_count}"
    )

    logger.print_audit_log()

    print("\n" + "=" * 70)
    print(f"Overall: {tests_passed}/{tests_total} tests passed!")

    return tests_passed == tests_total


if __name__ == "__main__":
    success = _run_tests()
    exit(0 if success else 1)

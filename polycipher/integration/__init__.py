# Integration Module
"""
Audit logging for cipher operations.

All events are logged with privacy-preserving key hashes.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'CipherEvent',
    'EventLogger',
    'get_key_hash',
    'get_key_hash_short',
    'create_event_logger',
]

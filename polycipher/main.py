"""
polycipher - Main Entry Point
Interactive Vigenère cipher menu.
"""

import sys
from typing import Optional

from .core_crypto.vigenere import Direction, VigenereError, transform
from .integration.event_logger import EventLogger


# Menu choice -> direction
MENU_OPTIONS = {
    0: Direction.ENCRYPT,
    1: Direction.DECRYPT,
}

# direction -> (message prompt, key prompt, result heading)
PROMPTS = {
    Direction.ENCRYPT: (
        "Enter the message to encrypt.",
        "Enter the key to encrypt.",
        "The ciphertext is:",
    ),
    Direction.DECRYPT: (
        "Enter the ciphertext to decrypt.",
        "Enter the key to decrypt.",
        "The plaintext is:",
    ),
}

EXIT_OK = 0
EXIT_CIPHER_ERROR = 1
EXIT_INVALID_OPTION = 2


def _parse_choice(raw: str) -> Optional[Direction]:
    try:
        return MENU_OPTIONS.get(int(raw.strip()))
    except ValueError:
        return None


def run_menu(event_logger: Optional[EventLogger] = None) -> int:
    """
    Run one encrypt-or-decrypt interaction on stdin/stdout.

    Args:
        event_logger: Logger that records the outcome (a new one if None)

    Returns:
        Exit status: 0 on success, 1 on a cipher error, 2 on an invalid option
    """
    if event_logger is None:
        event_logger = EventLogger()

    print("0: Encrypt\n1: Decrypt")
    raw_choice = input()
    direction = _parse_choice(raw_choice)

    if direction is None:
        print("Invalid option!!!")
        event_logger.log_invalid_option(raw_choice)
        event_logger.log_session_end()
        return EXIT_INVALID_OPTION

    message_prompt, key_prompt, heading = PROMPTS[direction]
    print(message_prompt)
    message = input()
    print(key_prompt)
    key = input()

    try:
        result = transform(message, key, direction)
    except VigenereError as exc:
        print(f"Error: {exc}")
        event_logger.log_failure(direction.value, exc, key=key)
        event_logger.log_session_end()
        return EXIT_CIPHER_ERROR

    print(heading)
    print(result)

    if direction is Direction.ENCRYPT:
        event_logger.log_encrypt(key, message, result)
    else:
        event_logger.log_decrypt(key, message, result)
    event_logger.log_session_end()
    return EXIT_OK


def main() -> int:
    """Main entry point for polycipher."""
    return run_menu()


if __name__ == "__main__":
    sys.exit(main())

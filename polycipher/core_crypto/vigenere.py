"""
Vigenère Cipher

A classical polyalphabetic substitution cipher over the 26-letter Latin
alphabet. This is for EDUCATIONAL/DEMONSTRATION purposes only - not
cryptographically secure!

Components:
- Normalizer: uppercase the input and strip everything that is not A-Z
- Table lookup: one cell of the Vigenère table via modular arithmetic
- Stream transformer: applies the lookup along the message with a repeating key

Security Note:
    The Vigenère cipher is trivially broken with frequency analysis once the
    key length is known (Kasiski examination, index of coincidence).
    This implementation is for learning purposes only.
"""

import string
from enum import Enum
from typing import List


# Constants
ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)  # 26
LETTER_INDEX = {letter: i for i, letter in enumerate(ALPHABET)}


# ============================================================================
# Errors
# ============================================================================

class VigenereError(ValueError):
    """Base class for Vigenère cipher errors."""
    pass


class InvalidLetterError(VigenereError):
    """Raised when a table lookup receives something other than A-Z."""
    pass


class EmptyKeyError(VigenereError):
    """Raised when the key has no letters left after normalization."""
    pass


class Direction(Enum):
    """Which way the table lookup runs."""
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


# ============================================================================
# Normalizer
# ============================================================================

def is_letter(char: str) -> bool:
    """True if char is exactly one uppercase letter A-Z."""
    return isinstance(char, str) and char in LETTER_INDEX


def normalize(text: str) -> str:
    """
    Prepare a string for encryption or decryption.

    Each character is uppercased and kept only when the result is one of
    the 26 letters A-Z. Order is preserved.

    Example:
        >>> normalize("Hello, World! 123")
        'HELLOWORLD'

    Args:
        text: Arbitrary input string

    Returns:
        String containing only uppercase letters (possibly empty)
    """
    return ''.join(
        upper for upper in (ch.upper() for ch in text)
        if upper in LETTER_INDEX
    )


# ============================================================================
# Table Lookup
# ============================================================================

def lookup(row: str, col: str, direction: Direction) -> str:
    """
    Look up one cell of the Vigenère table.

    Encryption shifts the row letter forward by the column letter's offset,
    decryption shifts it backward by the same offset.

    Args:
        row: Row letter (A-Z)
        col: Column letter (A-Z), the shift amount
        direction: Direction.ENCRYPT or Direction.DECRYPT

    Returns:
        The resulting letter

    Raises:
        InvalidLetterError: If row or col is not an uppercase letter A-Z
        ValueError: If direction is not a Direction
    """
    if not is_letter(row) or not is_letter(col):
        raise InvalidLetterError(
            f"Both row and col must be letters A-Z, got {row!r} and {col!r}"
        )

    row_index = LETTER_INDEX[row]
    col_index = LETTER_INDEX[col]

    if direction is Direction.ENCRYPT:
        result_index = (row_index + col_index) % ALPHABET_SIZE
    elif direction is Direction.DECRYPT:
        result_index = (row_index - col_index + ALPHABET_SIZE) % ALPHABET_SIZE
    else:
        raise ValueError(f"Unknown direction: {direction!r}")

    return ALPHABET[result_index]


def tabula_recta() -> List[str]:
    """
    Build the full 26x26 Vigenère table.

    Row r, column c holds lookup(ALPHABET[r], ALPHABET[c], ENCRYPT).
    Row 0 is the plain alphabet, each following row is shifted left by one.
    """
    return [
        ''.join(lookup(row, col, Direction.ENCRYPT) for col in ALPHABET)
        for row in ALPHABET
    ]


# ============================================================================
# Stream Transformer
# ============================================================================

def _prepare_key(key: str) -> str:
    prepared = normalize(key)
    if not prepared:
        raise EmptyKeyError("Key must contain at least one letter A-Z")
    return prepared


def _apply(message: str, key: str, direction: Direction) -> str:
    # message and key are already normalized, key is non-empty
    key_length = len(key)
    out = []

    for i, letter in enumerate(message):
        key_letter = key[i % key_length]
        if direction is Direction.ENCRYPT:
            # Key letter picks the row, message letter the shift
            out.append(lookup(key_letter, letter, Direction.ENCRYPT))
        else:
            # Ciphertext letter picks the row, key letter the shift to undo
            out.append(lookup(letter, key_letter, Direction.DECRYPT))

    return ''.join(out)


def transform(message: str, key: str, direction: Direction) -> str:
    """
    Encrypt or decrypt a message with a repeating key.

    Both message and key are normalized first. The key letter used at
    message position i is key[i % len(key)].

    Args:
        message: Plaintext or ciphertext (any characters)
        key: The key (any characters, at least one letter)
        direction: Direction.ENCRYPT or Direction.DECRYPT

    Returns:
        Uppercase result, same length as normalize(message)

    Raises:
        EmptyKeyError: If the key has no letters A-Z
    """
    if not isinstance(direction, Direction):
        raise ValueError(f"Unknown direction: {direction!r}")
    return _apply(normalize(message), _prepare_key(key), direction)


def encrypt(message: str, key: str) -> str:
    """
    Encrypt a message using the Vigenère cipher.

    Example:
        >>> encrypt("ATTACKATDAWN", "LEMON")
        'LXFOPVEFRNHR'
    """
    return transform(message, key, Direction.ENCRYPT)


def decrypt(message: str, key: str) -> str:
    """
    Decrypt a message using the Vigenère cipher.

    Example:
        >>> decrypt("LXFOPVEFRNHR", "LEMON")
        'ATTACKATDAWN'
    """
    return transform(message, key, Direction.DECRYPT)


class VigenereCipher:
    """
    Vigenère cipher bound to a single key.

    The key is normalized once at construction, so an unusable key fails
    early instead of on the first message.

    WARNING: This is for educational purposes only!

    Example:
        >>> cipher = VigenereCipher("lemon")
        >>> ciphertext = cipher.encrypt("attack at dawn")
        >>> ciphertext
        'LXFOPVEFRNHR'
        >>> cipher.decrypt(ciphertext)
        'ATTACKATDAWN'
    """

    def __init__(self, key: str):
        """
        Initialize the cipher.

        Args:
            key: The key (normalized to A-Z)

        Raises:
            EmptyKeyError: If the key has no letters A-Z
        """
        self._key = _prepare_key(key)

    @property
    def key(self) -> str:
        """Normalized key."""
        return self._key

    @property
    def key_length(self) -> int:
        return len(self._key)

    def transform(self, message: str, direction: Direction) -> str:
        """Encrypt or decrypt message with this cipher's key."""
        if not isinstance(direction, Direction):
            raise ValueError(f"Unknown direction: {direction!r}")
        return _apply(normalize(message), self._key, direction)

    def encrypt(self, plaintext: str) -> str:
        return self.transform(plaintext, Direction.ENCRYPT)

    def decrypt(self, ciphertext: str) -> str:
        return self.transform(ciphertext, Direction.DECRYPT)

    def __repr__(self) -> str:
        return f"VigenereCipher(key_length={self.key_length})"


# Self-test when run directly
if __name__ == "__main__":
    print("Vigenère Cipher Test")
    print("=" * 60)

    # Test 1: Normalization
    print("\n[Test 1] Normalization")
    normalized = normalize("Hello, World! 123")
    print(f"  Input:      'Hello, World! 123'")
    print(f"  Normalized: '{normalized}'")
    test1_pass = normalized == "HELLOWORLD"
    print(f"  Match: {test1_pass}")

    # Test 2: Textbook vector
    print("\n[Test 2] ATTACKATDAWN / LEMON")
    ciphertext = encrypt("ATTACKATDAWN", "LEMON")
    print(f"  Ciphertext: {ciphertext} (expected: LXFOPVEFRNHR)")
    test2_pass = ciphertext == "LXFOPVEFRNHR"
    print(f"  Match: {test2_pass}")

    # Test 3: Round trip
    print("\n[Test 3] Encrypt/decrypt round trip")
    message = "Meet me by the old oak tree at noon."
    recovered = decrypt(encrypt(message, "Oak"), "Oak")
    print(f"  Message:   {message}")
    print(f"  Recovered: {recovered}")
    test3_pass = recovered == normalize(message)
    print(f"  Match: {test3_pass}")

    # Test 4: Empty key rejected
    print("\n[Test 4] Empty key rejected")
    try:
        encrypt("hello", "123")
        test4_pass = False
    except EmptyKeyError as exc:
        print(f"  Raised: {exc}")
        test4_pass = True
    print(f"  Rejected: {test4_pass}")

    # Test 5: Tabula recta
    print("\n[Test 5] Tabula recta")
    table = tabula_recta()
    for row in table[:3]:
        print(f"  {row}")
    print("  ...")
    test5_pass = len(table) == ALPHABET_SIZE and table[0] == ALPHABET
    print(f"  Valid: {test5_pass}")

    # Summary
    all_passed = test1_pass and test2_pass and test3_pass and test4_pass and test5_pass
    print("\n" + "=" * 60)
    print(f"Overall: {'All tests passed!' if all_passed else 'Some tests failed!'}")
    print("\n⚠️  WARNING: The Vigenère cipher is NOT secure for real cryptographic use!")

# Core Cryptography Module
"""
Classical cipher implementations including:
- Vigenère cipher (normalization, table lookup, repeating-key transform)
- Tabula recta generation
"""

from .vigenere import (
    ALPHABET,
    ALPHABET_SIZE,
    Direction,
    VigenereError,
    InvalidLetterError,
    EmptyKeyError,
    VigenereCipher,
    normalize,
    lookup,
    transform,
    encrypt,
    decrypt,
    tabula_recta,
)

__all__ = [
    'ALPHABET',
    'ALPHABET_SIZE',
    'Direction',
    'VigenereError',
    'InvalidLetterError',
    'EmptyKeyError',
    'VigenereCipher',
    'normalize',
    'lookup',
    'transform',
    'encrypt',
    'decrypt',
    'tabula_recta',
]

"""Shared helpers and the common interface of the session ciphers."""

from __future__ import annotations

import string
from abc import ABC, abstractmethod

__all__ = [
    "Cipher",
    "bytes_to_hex_upper",
    "hex_to_bytes",
    "pad_to_multiple",
    "pkcs7_pad",
    "pkcs7_unpad",
    "strip_trailing_zeros",
    "xor_bytes",
]

_HEX_DIGITS = frozenset(string.hexdigits)


class Cipher(ABC):
    """A session cipher: text in, upper-case hex out, and back."""

    @abstractmethod
    def encrypt(self, text: str) -> str:
        """Encrypt ``text`` and return the ciphertext as upper-case hex."""

    @abstractmethod
    def decrypt(self, hex_text: str) -> str:
        """Decrypt hex ciphertext and return the plain text."""

    @staticmethod
    def _encode(text: str) -> bytes:
        return text.encode("utf-8")

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode("utf-8")


def bytes_to_hex_upper(data: bytes) -> str:
    """Return ``data`` as upper-case hexadecimal text."""
    return bytes(data).hex().upper()


def hex_to_bytes(text: str) -> bytes:
    """Parse hexadecimal text (either case) into bytes.

    Raises ValueError on an odd length or a non-hex character.
    """
    if len(text) % 2:
        raise ValueError("hex text must have an even number of digits")
    if not _HEX_DIGITS.issuperset(text):
        raise ValueError("hex text contains a non-hex character")
    return bytes.fromhex(text)


def pad_to_multiple(data: bytes, multiple: int) -> bytes:
    """Zero-pad ``data`` so its length is a multiple of ``multiple``."""
    if multiple <= 0:
        raise ValueError("multiple must be positive")
    remainder = len(data) % multiple
    if remainder == 0:
        return bytes(data)
    return bytes(data) + bytes(multiple - remainder)


def pkcs7_pad(data: bytes, block_size: int) -> bytes:
    """Apply PKCS#7 padding; a full block is added when already aligned."""
    if not 0 < block_size < 256:
        raise ValueError("block size must be between 1 and 255")
    count = block_size - len(data) % block_size
    return bytes(data) + bytes([count]) * count


def pkcs7_unpad(data: bytes) -> bytes:
    """Remove PKCS#7 padding, raising ValueError if it is malformed."""
    if not data:
        raise ValueError("cannot unpad empty data")
    count = data[-1]
    if count == 0 or count > len(data):
        raise ValueError("invalid PKCS#7 padding length")
    if any(byte != count for byte in data[-count:]):
        raise ValueError("invalid PKCS#7 padding bytes")
    return bytes(data[:-count])


def strip_trailing_zeros(data: bytes) -> bytes:
    """Drop trailing zero bytes, the inverse of zero padding."""
    return bytes(data).rstrip(b"\x00")


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length."""
    if len(a) != len(b):
        raise ValueError("operands must have the same length")
    return bytes(x ^ y for x, y in zip(a, b))
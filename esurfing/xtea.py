"""Variants of the XTEA block cipher used as session ciphers.

All four variants share the same round function: each half is updated with
``(v ^ sum) + key[...] + ((v << 4) ^ (v >> 5))`` over 32 rounds. They differ
in how the three round keys are ordered, whether the key words are
byte-swapped, and whether blocks are chained (CBC) with an initial vector.
Plain text is zero padded to a multiple of 8 bytes and the ciphertext is
returned as upper-case hex.
"""

from __future__ import annotations

import struct
from typing import Iterable, Iterator, Sequence

from .cipherutils import (
    Cipher,
    bytes_to_hex_upper,
    hex_to_bytes,
    pad_to_multiple,
    strip_trailing_zeros,
    xor_bytes,
)

__all__ = [
    "ModXteaCipher",
    "ModXteaIvCipher",
    "ModXteaPcCipher",
    "XteaCbcTriplePcCipher",
]

BLOCK_SIZE = 8
ROUNDS = 32
DELTA = 0x9E3779B9

_MASK32 = 0xFFFFFFFF
_BE_WORDS = struct.Struct(">2I")
_LE_WORDS = struct.Struct("<2I")

Key = tuple[int, int, int, int]


def _bswap32(value: int) -> int:
    return int.from_bytes(value.to_bytes(4, "big"), "little")


def _mix(value: int) -> int:
    return ((value << 4) & _MASK32) ^ (value >> 5)


def _encipher(v0: int, v1: int, key: Key) -> tuple[int, int]:
    total = 0
    for _ in range(ROUNDS):
        v0 = (v0 + ((v1 ^ total) + key[total & 3] + _mix(v1))) & _MASK32
        total = (total + DELTA) & _MASK32
        v1 = (v1 + (key[(total >> 11) & 3] + (v0 ^ total) + _mix(v0))) & _MASK32
    return v0, v1


def _decipher(v0: int, v1: int, key: Key) -> tuple[int, int]:
    total = (DELTA * ROUNDS) & _MASK32
    for _ in range(ROUNDS):
        v1 = (v1 - (key[(total >> 11) & 3] + (v0 ^ total) + _mix(v0))) & _MASK32
        total = (total - DELTA) & _MASK32
        v0 = (v0 - ((v1 ^ total) + key[total & 3] + _mix(v1))) & _MASK32
    return v0, v1


def _encrypt_block(block: bytes, keys: Iterable[Key]) -> bytes:
    v0, v1 = _BE_WORDS.unpack(block)
    for key in keys:
        v0, v1 = _encipher(v0, v1, key)
    return _BE_WORDS.pack(v0, v1)


def _decrypt_block(block: bytes, keys: Iterable[Key]) -> bytes:
    v0, v1 = _BE_WORDS.unpack(block)
    for key in keys:
        v0, v1 = _decipher(v0, v1, key)
    return _BE_WORDS.pack(v0, v1)


def _blocks(data: bytes) -> Iterator[bytes]:
    if len(data) % BLOCK_SIZE:
        raise ValueError("data length must be a multiple of 8 bytes")
    for offset in range(0, len(data), BLOCK_SIZE):
        yield data[offset:offset + BLOCK_SIZE]


def _ecb_encrypt(data: bytes, keys: Sequence[Key]) -> bytes:
    return b"".join(_encrypt_block(block, keys) for block in _blocks(data))


def _ecb_decrypt(data: bytes, keys: Sequence[Key]) -> bytes:
    return b"".join(_decrypt_block(block, keys) for block in _blocks(data))


def _cbc_encrypt(data: bytes, keys: Sequence[Key], iv: bytes) -> bytes:
    previous = iv
    out = bytearray()
    for block in _blocks(data):
        previous = _encrypt_block(xor_bytes(block, previous), keys)
        out += previous
    return bytes(out)


def _cbc_decrypt(data: bytes, keys: Sequence[Key], iv: bytes) -> bytes:
    previous = iv
    out = bytearray()
    for block in _blocks(data):
        out += xor_bytes(_decrypt_block(block, keys), previous)
        previous = block
    return bytes(out)


def _check_words(name: str, words: Sequence[int], count: int) -> tuple[int, ...]:
    values = tuple(words)
    if len(values) != count:
        raise ValueError(f"{name} must hold {count} 32-bit words, got {len(values)}")
    for value in values:
        if not 0 <= value <= _MASK32:
            raise ValueError(f"{name} word {value!r} is not an unsigned 32-bit value")
    return values


def _check_key(name: str, key: Sequence[int]) -> Key:
    return _check_words(name, key, 4)  # type: ignore[return-value]


def _swapped_key(name: str, key: Sequence[int]) -> Key:
    return tuple(_bswap32(word) for word in _check_key(name, key))  # type: ignore[return-value]


class ModXteaCipher(Cipher):
    """Three XTEA passes per block in ECB mode: key1, key2, then key3."""

    def __init__(self, key1: Sequence[int], key2: Sequence[int], key3: Sequence[int]) -> None:
        self._keys = (
            _check_key("key1", key1),
            _check_key("key2", key2),
            _check_key("key3", key3),
        )

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        return bytes_to_hex_upper(_ecb_encrypt(data, self._keys))

    def decrypt(self, hex_text: str) -> str:
        data = _ecb_decrypt(hex_to_bytes(hex_text), self._keys[::-1])
        return self._decode(strip_trailing_zeros(data))


class ModXteaIvCipher(Cipher):
    """Three XTEA passes per block in CBC mode: key3, key2, then key1."""

    def __init__(
        self,
        key1: Sequence[int],
        key2: Sequence[int],
        key3: Sequence[int],
        iv: Sequence[int],
    ) -> None:
        k1 = _check_key("key1", key1)
        k2 = _check_key("key2", key2)
        k3 = _check_key("key3", key3)
        self._keys = (k3, k2, k1)
        self._iv = _BE_WORDS.pack(*_check_words("iv", iv, 2))

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        return bytes_to_hex_upper(_cbc_encrypt(data, self._keys, self._iv))

    def decrypt(self, hex_text: str) -> str:
        data = _cbc_decrypt(hex_to_bytes(hex_text), self._keys[::-1], self._iv)
        return self._decode(strip_trailing_zeros(data))


class ModXteaPcCipher(Cipher):
    """Like :class:`ModXteaCipher`, with every key word byte-swapped."""

    def __init__(self, key1: Sequence[int], key2: Sequence[int], key3: Sequence[int]) -> None:
        self._keys = (
            _swapped_key("key1", key1),
            _swapped_key("key2", key2),
            _swapped_key("key3", key3),
        )

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        return bytes_to_hex_upper(_ecb_encrypt(data, self._keys))

    def decrypt(self, hex_text: str) -> str:
        data = _ecb_decrypt(hex_to_bytes(hex_text), self._keys[::-1])
        return self._decode(strip_trailing_zeros(data))


class XteaCbcTriplePcCipher(Cipher):
    """Three byte-swapped-key XTEA passes in CBC mode: key2, key1, then key0.

    The two IV words are laid out in little-endian byte order before being
    XORed into the first block.
    """

    def __init__(
        self,
        key0: Sequence[int],
        key1: Sequence[int],
        key2: Sequence[int],
        iv: Sequence[int],
    ) -> None:
        k0 = _swapped_key("key0", key0)
        k1 = _swapped_key("key1", key1)
        k2 = _swapped_key("key2", key2)
        self._keys = (k2, k1, k0)
        self._iv = _LE_WORDS.pack(*_check_words("iv", iv, 2))

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        return bytes_to_hex_upper(_cbc_encrypt(data, self._keys, self._iv))

    def decrypt(self, hex_text: str) -> str:
        data = _cbc_decrypt(hex_to_bytes(hex_text), self._keys[::-1], self._iv)
        return self._decode(strip_trailing_zeros(data))
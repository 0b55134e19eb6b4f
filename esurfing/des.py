"""DES block primitive and the two-layer triple-DES session ciphers."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from .cipherutils import (
    Cipher,
    bytes_to_hex_upper,
    hex_to_bytes,
    pad_to_multiple,
    strip_trailing_zeros,
    xor_bytes,
)

__all__ = [
    "des_encrypt_block",
    "des_decrypt_block",
    "DesedeCbcPcCipher",
    "DesedeEcbCipher",
]

BLOCK_SIZE = 8
TRIPLE_KEY_SIZE = 24

_IP = (
    58, 50, 42, 34, 26, 18, 10, 2, 60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6, 64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1, 59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5, 63, 55, 47, 39, 31, 23, 15, 7,
)
_FP = (
    40, 8, 48, 16, 56, 24, 64, 32, 39, 7, 47, 15, 55, 23, 63, 31,
    38, 6, 46, 14, 54, 22, 62, 30, 37, 5, 45, 13, 53, 21, 61, 29,
    36, 4, 44, 12, 52, 20, 60, 28, 35, 3, 43, 11, 51, 19, 59, 27,
    34, 2, 42, 10, 50, 18, 58, 26, 33, 1, 41, 9, 49, 17, 57, 25,
)
_PC1 = (
    57, 49, 41, 33, 25, 17, 9, 1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27, 19, 11, 3, 60, 52, 44, 36,
    63, 55, 47, 39, 31, 23, 15, 7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29, 21, 13, 5, 28, 20, 12, 4,
)
_E = (
    32, 1, 2, 3, 4, 5, 4, 5, 6, 7, 8, 9, 8, 9, 10, 11,
    12, 13, 12, 13, 14, 15, 16, 17, 16, 17, 18, 19, 20, 21, 20, 21,
    22, 23, 24, 25, 24, 25, 26, 27, 28, 29, 28, 29, 30, 31, 32, 1,
)
_PC2 = (
    14, 17, 11, 24, 1, 5, 3, 28, 15, 6, 21, 10, 23, 19, 12, 4,
    26, 8, 16, 7, 27, 20, 13, 2, 41, 52, 31, 37, 47, 55, 30, 40,
    51, 45, 33, 48, 44, 49, 39, 56, 34, 53, 46, 42, 50, 36, 29, 32,
)
_P = (
    16, 7, 20, 21, 29, 12, 28, 17, 1, 15, 23, 26, 5, 18, 31, 10,
    2, 8, 24, 14, 32, 27, 3, 9, 19, 13, 30, 6, 22, 11, 4, 25,
)
_SBOXES = (
    (14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7, 0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8,
     4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0, 15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13),
    (15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10, 3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5,
     0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15, 13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9),
    (10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8, 13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1,
     13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7, 1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12),
    (7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15, 13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9,
     10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4, 3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14),
    (2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9, 14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6,
     4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14, 11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3),
    (12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11, 10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8,
     9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6, 4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13),
    (4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1, 13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6,
     1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2, 6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12),
    (13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7, 1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2,
     7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8, 2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11),
)
_SHIFTS = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

_MASK28 = (1 << 28) - 1
_MASK32 = (1 << 32) - 1


def _permute(value: int, table: tuple[int, ...], width: int) -> int:
    """Select bits of ``value`` (1-based, counted from the most significant)."""
    out = 0
    for position in table:
        out = (out << 1) | ((value >> (width - position)) & 1)
    return out


def _rotl28(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (28 - shift))) & _MASK28


@lru_cache(maxsize=64)
def _subkeys(key: bytes) -> tuple[int, ...]:
    cd = _permute(int.from_bytes(key, "big"), _PC1, 64)
    c, d = cd >> 28, cd & _MASK28
    keys = []
    for shift in _SHIFTS:
        c, d = _rotl28(c, shift), _rotl28(d, shift)
        keys.append(_permute((c << 28) | d, _PC2, 56))
    return tuple(keys)


def _feistel(right: int, subkey: int) -> int:
    mixed = _permute(right, _E, 32) ^ subkey
    out = 0
    for box_index, box in enumerate(_SBOXES):
        chunk = (mixed >> (42 - 6 * box_index)) & 0x3F
        row = ((chunk >> 4) & 0b10) | (chunk & 1)
        column = (chunk >> 1) & 0xF
        out = (out << 4) | box[row * 16 + column]
    return _permute(out, _P, 32)


def _crypt(block: bytes, key: bytes, encrypt: bool) -> bytes:
    if len(block) != BLOCK_SIZE:
        raise ValueError("DES block must be 8 bytes")
    if len(key) != BLOCK_SIZE:
        raise ValueError("DES key must be 8 bytes")
    keys = _subkeys(bytes(key))
    order = keys if encrypt else tuple(reversed(keys))
    state = _permute(int.from_bytes(block, "big"), _IP, 64)
    left, right = state >> 32, state & _MASK32
    for subkey in order:
        left, right = right, left ^ _feistel(right, subkey)
    result = _permute((right << 32) | left, _FP, 64)
    return result.to_bytes(BLOCK_SIZE, "big")


def des_encrypt_block(block: bytes, key: bytes) -> bytes:
    """Encrypt one 8-byte block with single DES."""
    return _crypt(block, key, True)


def des_decrypt_block(block: bytes, key: bytes) -> bytes:
    """Decrypt one 8-byte block with single DES."""
    return _crypt(block, key, False)


def _split_triple_key(key: bytes) -> tuple[bytes, bytes, bytes]:
    return key[:8], key[8:16], key[16:24]


def _ede_encrypt(block: bytes, key: bytes) -> bytes:
    k1, k2, k3 = _split_triple_key(key)
    return des_encrypt_block(des_decrypt_block(des_encrypt_block(block, k1), k2), k3)


def _ede_decrypt(block: bytes, key: bytes) -> bytes:
    k1, k2, k3 = _split_triple_key(key)
    return des_decrypt_block(des_encrypt_block(des_decrypt_block(block, k3), k2), k1)


def _blocks(data: bytes) -> Iterator[bytes]:
    if len(data) % BLOCK_SIZE:
        raise ValueError("data length must be a multiple of 8 bytes")
    for offset in range(0, len(data), BLOCK_SIZE):
        yield data[offset:offset + BLOCK_SIZE]


def _check_length(name: str, value: bytes, size: int) -> bytes:
    if len(value) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(value)}")
    return bytes(value)


def _ecb_encrypt(data: bytes, key: bytes) -> bytes:
    return b"".join(_ede_encrypt(block, key) for block in _blocks(data))


def _ecb_decrypt(data: bytes, key: bytes) -> bytes:
    return b"".join(_ede_decrypt(block, key) for block in _blocks(data))


def _cbc_encrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    previous = iv
    out = bytearray()
    for block in _blocks(data):
        previous = _ede_encrypt(xor_bytes(block, previous), key)
        out += previous
    return bytes(out)


def _cbc_decrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    previous = iv
    out = bytearray()
    for block in _blocks(data):
        out += xor_bytes(_ede_decrypt(block, key), previous)
        previous = block
    return bytes(out)


class DesedeEcbCipher(Cipher):
    """Two layers of triple-DES in ECB mode with zero padding."""

    def __init__(self, key1: bytes, key2: bytes) -> None:
        self._key1 = _check_length("key1", key1, TRIPLE_KEY_SIZE)
        self._key2 = _check_length("key2", key2, TRIPLE_KEY_SIZE)

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        data = _ecb_encrypt(data, self._key1)
        data = _ecb_encrypt(data, self._key2)
        return bytes_to_hex_upper(data)

    def decrypt(self, hex_text: str) -> str:
        data = hex_to_bytes(hex_text)
        data = _ecb_decrypt(data, self._key2)
        data = _ecb_decrypt(data, self._key1)
        return self._decode(strip_trailing_zeros(data))


class DesedeCbcPcCipher(Cipher):
    """Two layers of triple-DES in CBC mode with zero padding.

    Encryption applies ``key2``/``iv2`` first and ``key1``/``iv1`` second;
    decryption undoes them in the reverse order.
    """

    def __init__(self, key1: bytes, key2: bytes, iv1: bytes, iv2: bytes) -> None:
        self._key1 = _check_length("key1", key1, TRIPLE_KEY_SIZE)
        self._key2 = _check_length("key2", key2, TRIPLE_KEY_SIZE)
        self._iv1 = _check_length("iv1", iv1, BLOCK_SIZE)
        self._iv2 = _check_length("iv2", iv2, BLOCK_SIZE)

    def encrypt(self, text: str) -> str:
        data = pad_to_multiple(self._encode(text), BLOCK_SIZE)
        data = _cbc_encrypt(data, self._key2, self._iv2)
        data = _cbc_encrypt(data, self._key1, self._iv1)
        return bytes_to_hex_upper(data)

    def decrypt(self, hex_text: str) -> str:
        data = hex_to_bytes(hex_text)
        data = _cbc_decrypt(data, self._key1, self._iv1)
        data = _cbc_decrypt(data, self._key2, self._iv2)
        return self._decode(strip_trailing_zeros(data))
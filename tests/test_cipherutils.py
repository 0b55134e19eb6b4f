import pytest

from esurfing.cipherutils import (
    Cipher,
    bytes_to_hex_upper,
    hex_to_bytes,
    pad_to_multiple,
    pkcs7_pad,
    pkcs7_unpad,
    strip_trailing_zeros,
    xor_bytes,
)


def test_hex_is_upper_case():
    assert bytes_to_hex_upper(b"\x00\xab\xff") == "00ABFF"


def test_hex_round_trip():
    data = bytes(range(256))
    assert hex_to_bytes(bytes_to_hex_upper(data)) == data


def test_hex_accepts_lower_case():
    assert hex_to_bytes("0aff") == b"\x0a\xff"


@pytest.mark.parametrize("bad", ["ABC", "ZZ", "0 11"])
def test_hex_rejects_malformed(bad):
    with pytest.raises(ValueError):
        hex_to_bytes(bad)


def test_pad_to_multiple_adds_zeros():
    assert pad_to_multiple(b"abc", 8) == b"abc" + bytes(5)


def test_pad_to_multiple_keeps_aligned():
    assert pad_to_multiple(b"abcdefgh", 8) == b"abcdefgh"


def test_pad_to_multiple_rejects_zero():
    with pytest.raises(ValueError):
        pad_to_multiple(b"abc", 0)


def test_pkcs7_pad_partial_block():
    assert pkcs7_pad(b"abc", 8) == b"abc" + b"\x05" * 5


def test_pkcs7_pad_full_block_when_aligned():
    padded = pkcs7_pad(b"a" * 16, 16)
    assert len(padded) == 32
    assert padded[16:] == b"\x10" * 16


@pytest.mark.parametrize("data", [b"", b"x", b"hello world", b"q" * 15, b"q" * 16])
def test_pkcs7_round_trip(data):
    assert pkcs7_unpad(pkcs7_pad(data, 16)) == data


@pytest.mark.parametrize("bad", [b"", b"abc\x00", b"abc\x09", b"ab\x01\x02"])
def test_pkcs7_unpad_rejects_malformed(bad):
    with pytest.raises(ValueError):
        pkcs7_unpad(bad)


def test_strip_trailing_zeros():
    assert strip_trailing_zeros(b"a\x00b\x00\x00") == b"a\x00b"
    assert strip_trailing_zeros(bytes(4)) == b""


def test_xor_bytes_is_involution():
    a = b"\x01\x02\x03\xff"
    b = b"\xf0\x0f\x33\x55"
    assert xor_bytes(xor_bytes(a, b), b) == a
    assert xor_bytes(a, a) == bytes(4)


def test_xor_bytes_length_mismatch():
    with pytest.raises(ValueError):
        xor_bytes(b"ab", b"abc")


def test_cipher_is_abstract():
    with pytest.raises(TypeError):
        Cipher()


class _Reverse(Cipher):
    def encrypt(self, text):
        return bytes_to_hex_upper(self._encode(text)[::-1])

    def decrypt(self, hex_text):
        return self._decode(hex_to_bytes(hex_text)[::-1])


def test_cipher_subclass_helpers_round_trip():
    cipher = _Reverse()
    encrypted = cipher.encrypt("ab")
    assert hex_to_bytes(encrypted) == b"ba"
    assert encrypted == bytes_to_hex_upper(b"ba")
    assert cipher.decrypt(cipher.encrypt("héllo")) == "héllo"
import pytest

from esurfing.cipherutils import bytes_to_hex_upper
from esurfing.des import (
    DesedeCbcPcCipher,
    DesedeEcbCipher,
    des_decrypt_block,
    des_encrypt_block,
)

DES_KEY = bytes.fromhex("133457799BBCDFF1")
DES_PLAIN = bytes.fromhex("0123456789ABCDEF")
DES_CIPHER = bytes.fromhex("85E813540F0AB405")

KEY1 = bytes(range(24))
KEY2 = bytes(range(100, 124))
IV1 = bytes(range(8))
IV2 = bytes(range(50, 58))


def test_des_known_vector_encrypt():
    assert des_encrypt_block(DES_PLAIN, DES_KEY) == DES_CIPHER


def test_des_known_vector_decrypt():
    assert des_decrypt_block(DES_CIPHER, DES_KEY) == DES_PLAIN


@pytest.mark.parametrize("block", [bytes(8), b"\xff" * 8, b"ABCDEFGH"])
def test_des_block_round_trip(block):
    key = b"\x0e\x32\x92\x32\xea\x6d\x0d\x73"
    assert des_decrypt_block(des_encrypt_block(block, key), key) == block


def test_des_block_rejects_bad_lengths():
    with pytest.raises(ValueError):
        des_encrypt_block(b"short", DES_KEY)
    with pytest.raises(ValueError):
        des_decrypt_block(DES_PLAIN, b"short")


@pytest.mark.parametrize("text", ["a", "hello", "exactly8", "a longer message with 32 bytes!!", "中文"])
def test_ecb_round_trip(text):
    cipher = DesedeEcbCipher(KEY1, KEY2)
    encrypted = cipher.encrypt(text)
    assert encrypted == encrypted.upper()
    assert len(encrypted) % 16 == 0
    assert cipher.decrypt(encrypted) == text


def test_ecb_identical_blocks_repeat():
    cipher = DesedeEcbCipher(KEY1, KEY2)
    encrypted = cipher.encrypt("SAMEBLOKSAMEBLOK")
    assert encrypted[:16] == encrypted[16:]


def test_ecb_decrypt_rejects_partial_block():
    cipher = DesedeEcbCipher(KEY1, KEY2)
    with pytest.raises(ValueError):
        cipher.decrypt("00112233")


def test_ecb_rejects_bad_key_length():
    with pytest.raises(ValueError):
        DesedeEcbCipher(KEY1[:16], KEY2)


@pytest.mark.parametrize("text", ["x", "payload", "exactly8", "<xml>some longer body</xml>"])
def test_cbc_round_trip(text):
    cipher = DesedeCbcPcCipher(KEY1, KEY2, IV1, IV2)
    encrypted = cipher.encrypt(text)
    assert len(encrypted) % 16 == 0
    assert cipher.decrypt(encrypted) == text


def test_cbc_identical_blocks_differ():
    cipher = DesedeCbcPcCipher(KEY1, KEY2, IV1, IV2)
    encrypted = cipher.encrypt("SAMEBLOKSAMEBLOK")
    assert encrypted[:16] != encrypted[16:]
    assert cipher.decrypt(encrypted) == "SAMEBLOKSAMEBLOK"


def test_cbc_iv_changes_ciphertext():
    first = DesedeCbcPcCipher(KEY1, KEY2, IV1, IV2).encrypt("message")
    second = DesedeCbcPcCipher(KEY1, KEY2, IV2, IV1).encrypt("message")
    assert first != second
    assert len(first) == len(second) == 16


def test_cbc_swapped_keys_change_ciphertext():
    encrypted = DesedeCbcPcCipher(KEY1, KEY2, IV1, IV2).encrypt("ABCDEFGH")
    swapped_cipher = DesedeCbcPcCipher(KEY2, KEY1, IV1, IV2)
    swapped = swapped_cipher.encrypt("ABCDEFGH")
    assert len(swapped) == len(encrypted) == 16
    assert swapped != encrypted
    assert swapped_cipher.decrypt(swapped) == "ABCDEFGH"


def test_cbc_decrypt_rejects_partial_block():
    cipher = DesedeCbcPcCipher(KEY1, KEY2, IV1, IV2)
    with pytest.raises(ValueError):
        cipher.decrypt("0011223344")


def test_cbc_rejects_bad_iv_length():
    with pytest.raises(ValueError):
        DesedeCbcPcCipher(KEY1, KEY2, IV1[:4], IV2)
import pytest

from esurfing.zuc import ZucCipher, ZucKeystream

KEY = bytes(range(16))
IV = bytes(range(16, 32))


def test_zero_key_and_iv_keystream_matches_reference_vector():
    stream = ZucKeystream(bytes(16), bytes(16))
    assert [stream.next_word(), stream.next_word()] == [0x27BEDE74, 0x018082DA]


def test_encrypting_nul_word_yields_first_keystream_word():
    cipher = ZucCipher(bytes(16), bytes(16))
    first = ZucKeystream(bytes(16), bytes(16)).next_word()
    assert cipher.encrypt("\x00\x00\x00\x00") == f"{first:08X}"


@pytest.mark.parametrize("text", ["", "a", "abcd", "hello world", "登录成功", "x" * 100])
def test_round_trip(text):
    cipher = ZucCipher(KEY, IV)
    assert cipher.decrypt(cipher.encrypt(text)) == text


@pytest.mark.parametrize("text", ["a", "abcd", "abcde", "0123456789"])
def test_ciphertext_is_padded_to_whole_words(text):
    hex_text = ZucCipher(KEY, IV).encrypt(text)
    assert len(hex_text) % 8 == 0
    assert len(hex_text) >= 2 * len(text)
    assert hex_text == hex_text.upper()


def test_empty_text_encrypts_to_empty_hex():
    assert ZucCipher(KEY, IV).encrypt("") == ""


def test_encryption_is_deterministic():
    cipher = ZucCipher(KEY, IV)
    first = cipher.encrypt("message")
    assert len(first) == 16
    assert ZucCipher(KEY, IV).encrypt("message") == first
    assert cipher.decrypt(first) == "message"


def test_process_is_an_involution():
    data = b"some bytes to mask"
    masked = ZucKeystream(KEY, IV).process(data)
    assert ZucKeystream(KEY, IV).process(masked) == data
    assert masked != data


def test_process_split_across_calls_matches_single_call():
    data = bytes(range(23))
    whole = ZucKeystream(KEY, IV).process(data)
    stream = ZucKeystream(KEY, IV)
    pieces = stream.process(data[:3]) + stream.process(data[3:10]) + stream.process(data[10:])
    assert pieces == whole


def test_process_uses_keystream_words_big_endian():
    words = ZucKeystream(KEY, IV)
    expected = b"".join(words.next_word().to_bytes(4, "big") for _ in range(2))
    assert ZucKeystream(KEY, IV).process(bytes(8)) == expected


def test_different_iv_changes_ciphertext():
    assert ZucCipher(KEY, IV).encrypt("same text") != ZucCipher(KEY, bytes(16)).encrypt("same text")
    assert ZucCipher(KEY, bytes(16)).decrypt(ZucCipher(KEY, bytes(16)).encrypt("same text")) == "same text"


@pytest.mark.parametrize("key,iv", [(bytes(15), bytes(16)), (bytes(16), bytes(17))])
def test_wrong_key_or_iv_length_raises(key, iv):
    with pytest.raises(ValueError):
        ZucCipher(key, iv)
    with pytest.raises(ValueError):
        ZucKeystream(key, iv)


def test_decrypt_rejects_bad_hex():
    with pytest.raises(ValueError):
        ZucCipher(KEY, IV).decrypt("ABC")
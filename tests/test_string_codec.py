"""字串 ID 加密/解密測試"""

import logging

from obfuscate_ids.keys import KeyMaterial
from obfuscate_ids.string_codec import (
    DecodeResult,
    decode_result,
    decrypt_id,
    derive_key,
    encrypt_id,
)


KEYS_A = KeyMaterial(cipher_key="test_cipher_key", numeric_cipher_key=0)
KEYS_B = KeyMaterial(cipher_key="another_cipher_key", numeric_cipher_key=0)


class TestDeriveKey:
    """金鑰衍生測試"""

    def test_key_length(self):
        assert len(derive_key("test_cipher_key")) == 32

    def test_empty_key_allowed(self):
        assert len(derive_key("")) == 32

    def test_different_keys(self):
        assert derive_key("a") != derive_key("b")


class TestEncryptDecryptId:
    """加解密一致性測試"""

    def test_known_token(self):
        # SHA-256 金鑰、全零 IV、PKCS#7 padding 下的固定結果，跨程序不可改變
        assert encrypt_id(42, keys=KEYS_A) == "HcVjTAHnhnha28WHwweiwQ=="
        assert encrypt_id(42, padding=False, keys=KEYS_A) == "HcVjTAHnhnha28WHwweiwQ"

    def test_known_token_multi_block(self):
        n = 123456789012345678901234567890
        assert encrypt_id(n, keys=KEYS_A) == "87FYq4Je28SYbOu6nQa-3xbSt0M4201dX7MsWR4coqM="

    def test_decrypt_known_token(self):
        assert decrypt_id("HcVjTAHnhnha28WHwweiwQ==", keys=KEYS_A) == 42
        assert decrypt_id("HcVjTAHnhnha28WHwweiwQ", keys=KEYS_A) == 42

    def test_roundtrip(self):
        for n in [0, 1, 42, 999, 2**30, 2**64 + 7]:
            token = encrypt_id(n, keys=KEYS_A)
            assert decrypt_id(token, keys=KEYS_A) == n

    def test_roundtrip_without_padding(self):
        for n in [0, 1, 42, 123456789012345678901234567890]:
            token = encrypt_id(n, padding=False, keys=KEYS_A)
            assert "=" not in token
            assert decrypt_id(token, keys=KEYS_A) == n

    def test_padding_kept_by_default(self):
        # 單一區塊 16 bytes -> base64 22 字元 + "=="
        token = encrypt_id(42, keys=KEYS_A)
        assert len(token) == 24
        assert token.endswith("==")
        assert encrypt_id(42, padding=False, keys=KEYS_A) == token[:22]

    def test_urlsafe_alphabet(self):
        for n in range(200):
            token = encrypt_id(n, keys=KEYS_A)
            assert "+" not in token
            assert "/" not in token

    def test_deterministic(self):
        assert encrypt_id(42, keys=KEYS_A) == encrypt_id(42, keys=KEYS_A)

    def test_string_and_int_render_the_same(self):
        assert encrypt_id("42", keys=KEYS_A) == encrypt_id(42, keys=KEYS_A)

    def test_different_keys_produce_different_tokens(self):
        assert encrypt_id(42, keys=KEYS_A) != encrypt_id(42, keys=KEYS_B)

    def test_different_ids_produce_different_tokens(self):
        tokens = {encrypt_id(n, keys=KEYS_A) for n in range(100)}
        assert len(tokens) == 100

    def test_non_numeric_plaintext_parses_to_zero(self):
        token = encrypt_id("abc", keys=KEYS_A)
        assert decrypt_id(token, keys=KEYS_A) == 0

    def test_leading_digits_are_kept(self):
        token = encrypt_id("123abc", keys=KEYS_A)
        assert decrypt_id(token, keys=KEYS_A) == 123


class TestDecodeFailure:
    """解密失敗時不拋出例外"""

    def test_invalid_base64(self):
        for token in ["!!!", "abc$def", "ab=cd", "A", "AAAAA", "é"]:
            assert decrypt_id(token, keys=KEYS_A) is None

    def test_empty_token(self):
        assert decrypt_id("", keys=KEYS_A) is None

    def test_wrong_block_length(self):
        # 3 bytes 密文，不是 16 的倍數
        assert decrypt_id("AAAA", keys=KEYS_A) is None

    def test_truncated_token(self):
        token = encrypt_id(123456789012345678901234567890, padding=False, keys=KEYS_A)
        assert decrypt_id(token[:-4], keys=KEYS_A) is None

    def test_wrong_key(self):
        token = encrypt_id(42, keys=KEYS_A)
        assert decrypt_id(token, keys=KEYS_B) != 42

    def test_result_carries_reason(self):
        result = decode_result("!!!", keys=KEYS_A)
        assert isinstance(result, DecodeResult)
        assert not result.ok
        assert result.value is None
        assert result.error

    def test_success_result(self):
        result = decode_result(encrypt_id(7, keys=KEYS_A), keys=KEYS_A)
        assert result.ok
        assert result.value == 7

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="obfuscate_ids"):
            decrypt_id("not-a-token!", keys=KEYS_A)
        assert "could not decrypt not-a-token!" in caplog.text

    def test_failure_log_includes_traceback(self, caplog):
        with caplog.at_level(logging.WARNING, logger="obfuscate_ids"):
            decrypt_id("AAAA", keys=KEYS_A)
        record = caplog.records[-1]
        assert record.exc_info is not None
        assert record.exc_info[0] is not None
        assert issubclass(record.exc_info[0], ValueError)

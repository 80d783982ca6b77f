"""
obfuscate_ids 字串 ID 加密/解密模組

以 AES-256-CBC 將任意 ID（通常是十進位整數）加密為 URL 安全的 base64 字串。
金鑰為 CIPHER_KEY 的 SHA-256 摘要。
解密失敗不拋出例外，而是回傳失敗結果並寫入 log。
"""

import base64
import logging
import re
from dataclasses import dataclass
from typing import Optional

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Util.Padding import pad, unpad

from obfuscate_ids.keys import KeyMaterial, get_key_material, parse_leading_int

logger = logging.getLogger(__name__)

# 固定 IV（全零）：刻意不隨機，同一 ID 必須永遠得到同一 token，
# 已發出的永久連結才不會失效。不可改成隨機 IV。
FIXED_IV = bytes(AES.block_size)

# URL 安全 base64 字元，結尾最多兩個 "="
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")


@dataclass(frozen=True)
class DecodeResult:
    """解密結果：成功時 value 為整數，失敗時 error 為原因"""

    value: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def derive_key(cipher_key: str) -> bytes:
    """從 CIPHER_KEY 衍生 256-bit 金鑰（SHA-256 摘要）"""
    return SHA256.new(cipher_key.encode("utf-8")).digest()


def _cipher(keys: KeyMaterial):
    """以衍生金鑰與固定 IV 建立 AES-256-CBC 物件"""
    return AES.new(derive_key(keys.cipher_key), AES.MODE_CBC, iv=FIXED_IV)


def _urlsafe_b64decode(token: str) -> bytes:
    """嚴格的 URL 安全 base64 解碼，缺少的 "=" 會自動補上"""
    if not TOKEN_PATTERN.match(token):
        raise ValueError("invalid base64")
    if not token.endswith("=") and len(token) % 4:
        token += "=" * (4 - len(token) % 4)
    return base64.b64decode(token, altchars=b"-_", validate=True)


def encrypt_id(plain_id, padding: bool = True, keys: Optional[KeyMaterial] = None) -> str:
    """
    加密 ID

    Args:
        plain_id: 任何可轉為字串的值（通常為整數主鍵）
        padding: 是否保留 base64 結尾的 "="，放在 URL 路徑中時可設為 False
        keys: 金鑰，預設使用程序共用的金鑰

    Returns:
        URL 安全的 base64 token
    """
    keys = keys or get_key_material()
    ciphertext = _cipher(keys).encrypt(pad(str(plain_id).encode("utf-8"), AES.block_size))
    token = base64.urlsafe_b64encode(ciphertext).decode("ascii")
    if not padding:
        token = token.rstrip("=")
    return token


def decode_result(token, keys: Optional[KeyMaterial] = None) -> DecodeResult:
    """
    解密 token，不拋出例外

    base64 格式錯誤、密文長度錯誤、padding 錯誤（竄改或金鑰不符）
    皆轉為失敗結果。明文非數字時解析為 0。

    Returns:
        DecodeResult
    """
    keys = keys or get_key_material()
    token = str(token)
    try:
        ciphertext = _urlsafe_b64decode(token)
        plaintext = unpad(_cipher(keys).decrypt(ciphertext), AES.block_size)
    except ValueError as e:
        logger.warning("could not decrypt %s: %s", token, e, exc_info=True)
        return DecodeResult(error=str(e))
    return DecodeResult(value=parse_leading_int(plaintext))


def decrypt_id(token, keys: Optional[KeyMaterial] = None) -> Optional[int]:
    """解密 token，失敗時回傳 None（等同查無資料）"""
    return decode_result(token, keys).value

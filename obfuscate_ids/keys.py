"""
obfuscate_ids 金鑰模組

負責從設定來源讀取兩把金鑰，並在程序生命週期內快取。
快取後的值不再變動，設定來源之後被修改也不影響已解析的金鑰，
只有重新啟動程序才會讀到新值。
"""

import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

from obfuscate_ids.config import config

logger = logging.getLogger(__name__)

# 開頭空白、可選正負號、數字（允許數字間的底線）
LEADING_INT = re.compile(rb"\s*([+-]?\d+(?:_\d+)*)")


@dataclass(frozen=True)
class KeyMaterial:
    """兩把加密金鑰，建立後不可修改"""

    cipher_key: str
    numeric_cipher_key: int


def parse_leading_int(raw) -> int:
    """
    盡力解析字串開頭的整數，無法解析時回傳 0。

    例如 "42abc" -> 42、"abc" -> 0、" -7" -> -7。

    Args:
        raw: str 或 bytes，None 視為空字串
    """
    if raw is None:
        return 0
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    m = LEADING_INT.match(raw)
    if not m:
        return 0
    return int(m.group(1).replace(b"_", b""))


def resolve_key_material(source: Optional[Mapping[str, str]] = None) -> KeyMaterial:
    """
    從設定來源解析金鑰。

    Args:
        source: 提供 get(name) 的設定來源，預設為 os.environ

    Returns:
        KeyMaterial
    """
    if source is None:
        source = os.environ

    cipher_key = source.get(config.CIPHER_KEY_NAME)
    if cipher_key is None:
        cipher_key = source.get(config.FALLBACK_SECRET_NAME)
    if cipher_key is None:
        logger.warning(
            "%s 與 %s 皆未設定，使用空字串作為加密金鑰",
            config.CIPHER_KEY_NAME,
            config.FALLBACK_SECRET_NAME,
        )
        cipher_key = ""

    numeric_cipher_key = parse_leading_int(source.get(config.NUMERIC_CIPHER_KEY_NAME))
    if numeric_cipher_key < 0:
        logger.warning("%s 為負數，視為 0", config.NUMERIC_CIPHER_KEY_NAME)
        numeric_cipher_key = 0
    if numeric_cipher_key == 0:
        # 金鑰為 0 時數字加密只剩位元反轉
        logger.warning("%s 未設定或為 0，數字 ID 混淆強度不足", config.NUMERIC_CIPHER_KEY_NAME)

    return KeyMaterial(cipher_key=cipher_key, numeric_cipher_key=numeric_cipher_key)


@lru_cache()
def get_key_material() -> KeyMaterial:
    """
    取得程序共用的金鑰，第一次呼叫時才解析。

    併發的第一次呼叫可能重複解析，結果相同，不需加鎖。
    """
    return resolve_key_material()


def reset_key_material() -> None:
    """清除快取（僅供測試使用）"""
    get_key_material.cache_clear()

"""
obfuscate_ids 數字 ID 加密/解密模組

在 30 位元空間內做一對一映射：
先將 ID 的二進位字串與金鑰逐位 XOR，再反轉位元順序。
輸出仍是同範圍內的整數，看起來像一般數字而非 token。
"""

from typing import Optional

from obfuscate_ids.keys import KeyMaterial, get_key_material

MAX_BITS_FOR_NUMERIC_ENCRYPTION = 30


def max_numeric_id() -> int:
    """可加密的最大數字 ID"""
    return (2 ** MAX_BITS_FOR_NUMERIC_ENCRYPTION) - 1


def _xor(binary_a: str, binary_b: str, n: int) -> str:
    """
    兩個二進位字串的前 n 位逐位 XOR

    長度不足 n 的部分視為 0，例如 _xor("1000", "0011", 4) -> "1011"
    """
    return "".join(
        str(int(binary_a[i] if i < len(binary_a) else "0") ^ int(binary_b[i] if i < len(binary_b) else "0"))
        for i in range(n)
    )


def _key_bits(keys: KeyMaterial) -> str:
    """金鑰的二進位字串（不補零，從最高位對齊，超過 n 位的部分不使用）"""
    return format(keys.numeric_cipher_key, "b")


def encrypt_numeric(plain_id: int, keys: Optional[KeyMaterial] = None) -> int:
    """
    加密數字 ID

    Args:
        plain_id: 0 ~ 2^30-1 的整數
        keys: 金鑰，預設使用程序共用的金鑰

    Returns:
        同範圍內的加密整數

    Raises:
        ValueError: ID 超出 30 位元範圍
    """
    if plain_id < 0 or plain_id > max_numeric_id():
        raise ValueError(f"數字加密不支援大於 {max_numeric_id()} 或負數的 ID")

    keys = keys or get_key_material()
    n = MAX_BITS_FOR_NUMERIC_ENCRYPTION
    binary_id = format(plain_id, "b").rjust(n, "0")
    return int(_xor(binary_id, _key_bits(keys), n)[::-1], 2)


def decrypt_numeric(encrypted_id: int, keys: Optional[KeyMaterial] = None) -> int:
    """
    解密數字 ID

    超過 30 位元的輸入只取低 30 位。

    Returns:
        原始 ID
    """
    keys = keys or get_key_material()
    n = MAX_BITS_FOR_NUMERIC_ENCRYPTION
    binary_id = format(encrypted_id & max_numeric_id(), "b").rjust(n, "0")[::-1]
    return int(_xor(binary_id, _key_bits(keys), n), 2)

"""
obfuscate_ids 設定模組

集中管理金鑰的設定名稱。
"""


class Config:
    """金鑰來源設定"""

    # 字串 ID 加密金鑰
    CIPHER_KEY_NAME: str = "OBFUSCATE_IDS_CIPHER_KEY"
    # 數字 ID 加密金鑰（整數）
    NUMERIC_CIPHER_KEY_NAME: str = "OBFUSCATE_IDS_NUMERIC_CIPHER_KEY"
    # 未設定 CIPHER_KEY 時的備援密鑰
    FALLBACK_SECRET_NAME: str = "SECRET_KEY_BASE"

    @classmethod
    def validate(cls):
        """啟動時檢查設定"""
        if not cls.CIPHER_KEY_NAME or not cls.NUMERIC_CIPHER_KEY_NAME:
            raise ValueError("金鑰設定名稱不可為空")


config = Config()

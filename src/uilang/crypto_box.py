"""
crypto_box.py
言語ファイルの暗号化

任意長のシークレットから16バイトの鍵とIVを導出し、
AES-128-CBC（PKCS7パディング）でバイト列を暗号化・復号する。

注意: 鍵導出はソルトを使わず、IVに鍵素材を反転して再利用する。
既存の暗号化済み言語ファイルとの互換性のための方式であり、
安全な鍵導出関数ではない。
"""
from typing import Tuple, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from uilang.error_handling import DecryptionError

KEY_SIZE = 16  # bytes
BLOCK_SIZE = 128  # bits


def derive_key(secret: bytes) -> Tuple[bytes, bytes]:
    """
    シークレットから鍵とIVを導出する

    16バイト以上なら先頭16バイトを鍵とし、その反転をIVとする。
    16バイト未満ならシークレットを繰り返して16バイトを埋める。

    Args:
        secret: 鍵素材

    Returns:
        (key, iv) それぞれ16バイト

    Raises:
        ValueError: シークレットが空
    """
    if not secret:
        raise ValueError("secret must not be empty")

    if len(secret) >= KEY_SIZE:
        key = bytes(secret[:KEY_SIZE])
    else:
        key16 = bytearray(KEY_SIZE)
        offset = 0
        for i in range(KEY_SIZE):
            key16[i] = secret[i - offset]
            if i - offset == len(secret) - 1:
                offset += len(secret)
        key = bytes(key16)
    return key, key[::-1]


def encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-128-CBCで暗号化する（最終ブロックはPKCS7でパディング）"""
    padder = padding.PKCS7(BLOCK_SIZE).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    AES-128-CBCで復号する

    Raises:
        DecryptionError: 長さ・パディングが不正、または鍵が一致しない
    """
    if not ciphertext or len(ciphertext) % (BLOCK_SIZE // 8):
        raise DecryptionError(f"Ciphertext length {len(ciphertext)} is not a multiple of the block size")
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionError(f"Decryption failed: {e}", original_exception=e)


class CryptoBox:
    """シークレットから導出した鍵・IVを保持する暗号化ボックス"""

    def __init__(self, secret: Union[str, bytes]):
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        self.key, self.iv = derive_key(secret)

    def encrypt(self, data: bytes) -> bytes:
        return encrypt(data, self.key, self.iv)

    def decrypt(self, data: bytes) -> bytes:
        return decrypt(data, self.key, self.iv)

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from utils.errors import AuthenticationFailed, InvalidKey, MalformedInput

NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZES = (16, 24, 32)


def _cipher(key: bytes) -> AESGCM:
    if len(key) not in KEY_SIZES:
        raise InvalidKey(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
    return AESGCM(key)


def aead_encrypt(key: bytes, plaintext: bytes, aad: bytes | None = None) -> bytes:
    """Returns nonce(12) || ciphertext || tag(16)."""
    aesgcm = _cipher(key)
    nonce = os.urandom(NONCE_SIZE)
    ct = aesgcm.encrypt(nonce, plaintext, aad)
    return nonce + ct


def aead_decrypt(key: bytes, framed: bytes, aad: bytes | None = None) -> bytes:
    if len(framed) < NONCE_SIZE + TAG_SIZE:
        raise MalformedInput(
            f"ciphertext is {len(framed)} bytes, need at least {NONCE_SIZE + TAG_SIZE}"
        )
    aesgcm = _cipher(key)
    nonce, ct = framed[:NONCE_SIZE], framed[NONCE_SIZE:]
    try:
        return aesgcm.decrypt(nonce, ct, aad)
    except InvalidTag as exc:
        raise AuthenticationFailed("authentication tag mismatch (tampered data or wrong key)") from exc

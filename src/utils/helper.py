import base64
import binascii

from utils.errors import MalformedInput


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    try:
        return base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInput(f"failed to decode ciphertext: {exc}") from exc

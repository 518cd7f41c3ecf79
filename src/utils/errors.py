class NBFileError(Exception):
    """Base class for every failure raised while toggling a .nb record."""


class RecordIOError(NBFileError, OSError):
    pass


class MalformedRecord(NBFileError, ValueError):
    pass


class MalformedInput(NBFileError, ValueError):
    """Invalid base64 or a framed ciphertext too short to hold nonce and tag."""


class InvalidKey(NBFileError, ValueError):
    pass


class AuthenticationFailed(NBFileError):
    """GCM tag did not verify: tampered data or the wrong key."""


class KeyResolutionFailed(NBFileError):
    pass


class NothingToDecrypt(NBFileError):
    pass

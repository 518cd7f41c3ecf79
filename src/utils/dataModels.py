import json

from dataclasses import dataclass
from typing import Any, Dict

from utils.errors import MalformedRecord

DEFAULT_NB_FILE = "test.json.nb"
DEFAULT_KEY_ENCODING = "raw"
DEFAULT_CREDENTIAL = "interactive"

KEY_ENCODINGS = ("raw", "base64", "hex")
CREDENTIAL_KINDS = ("interactive", "default", "cli")

VAULT_URL_TEMPLATE = "https://{name}.vault.azure.net"

# On-disk key order; kept stable so the file diffs cleanly between runs.
RECORD_FIELDS = ("encrypted_data", "key_vault_name", "secret_name", "data")


@dataclass
class Record:
    encrypted_data: str = ""
    key_vault_name: str = ""
    secret_name: str = ""
    data: str = ""

    @property
    def state(self) -> str:
        if self.data:
            return "plaintext"
        if self.encrypted_data:
            return "ciphertext"
        return "empty"

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in RECORD_FIELDS}

    def to_bytes(self) -> bytes:
        text = json.dumps(self.to_dict(), ensure_ascii=False, indent=2) + "\n"
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedRecord(f"record is not valid UTF-8 text: {exc}") from exc

    @staticmethod
    def from_bytes(b: bytes) -> "Record":
        try:
            obj: Any = json.loads(b.decode("utf-8"))
        except (ValueError, RecursionError) as exc:
            raise MalformedRecord(f"failed to parse .nb file: {exc}") from exc
        if not isinstance(obj, dict):
            raise MalformedRecord(f"failed to parse .nb file: expected a JSON object, got {type(obj).__name__}")
        fields = {}
        for name in RECORD_FIELDS:
            value = obj.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise MalformedRecord(f"failed to parse .nb file: field {name!r} must be a string")
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                # JSON allows lone surrogate escapes such as "\ud800".
                raise MalformedRecord(f"failed to parse .nb file: field {name!r} is not valid UTF-8 text") from exc
            fields[name] = value
        return Record(**fields)

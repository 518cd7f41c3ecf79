import json

from pathlib import Path

import pytest

ZERO_KEY = bytes(32)


class FakeResolver:
    def __init__(self, key: bytes = ZERO_KEY):
        self.key = key
        self.calls = []

    def resolve_key(self, vault_name: str, secret_name: str) -> bytes:
        self.calls.append((vault_name, secret_name))
        return self.key


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def nb_file(tmp_path: Path) -> Path:
    path = tmp_path / "test.json.nb"
    path.write_text(json.dumps({
        "data": "hello",
        "key_vault_name": "kv1",
        "secret_name": "s1",
        "encrypted_data": "",
    }))
    return path

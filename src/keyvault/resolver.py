"""Resolve the symmetric key named by a .nb record from Azure Key Vault.

The credential is built once by the caller and handed to the resolver; the
resolver keeps no session state of its own and never caches secret values.
"""
import base64
import binascii
import logging
import re

from azure.core.exceptions import AzureError
from azure.identity import AzureCliCredential, DefaultAzureCredential, InteractiveBrowserCredential
from azure.keyvault.secrets import SecretClient

from utils.dataModels import KEY_ENCODINGS, VAULT_URL_TEMPLATE
from utils.errors import KeyResolutionFailed

logger = logging.getLogger(__name__)

# Key Vault names: 3-24 chars, letters, digits and dashes, starting with a letter.
VAULT_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]{1,22}[A-Za-z0-9]$")


def build_credential(kind: str):
    if kind == "interactive":
        return InteractiveBrowserCredential()
    if kind == "default":
        return DefaultAzureCredential()
    if kind == "cli":
        return AzureCliCredential()
    raise ValueError(f"Unknown credential kind: {kind}")


def decode_key(value: str, encoding: str) -> bytes:
    if encoding == "raw":
        return value.encode("utf-8")
    if encoding == "base64":
        return base64.b64decode(value.strip(), validate=True)
    if encoding == "hex":
        return binascii.unhexlify(value.strip())
    raise ValueError(f"Unknown key encoding: {encoding}")


class AzureKeyVaultResolver:
    def __init__(self, credential, key_encoding: str = "raw", client_factory=SecretClient):
        if key_encoding not in KEY_ENCODINGS:
            raise ValueError(f"Unknown key encoding: {key_encoding}")
        self.credential = credential
        self.key_encoding = key_encoding
        self.client_factory = client_factory

    def resolve_key(self, vault_name: str, secret_name: str) -> bytes:
        if not vault_name or not secret_name:
            raise KeyResolutionFailed("key_vault_name and secret_name must both be set")
        if not VAULT_NAME_RE.fullmatch(vault_name):
            raise KeyResolutionFailed(f"invalid Key Vault name: {vault_name!r}")
        vault_url = VAULT_URL_TEMPLATE.format(name=vault_name)
        logger.info("fetching secret %s from %s", secret_name, vault_url)
        try:
            client = self.client_factory(vault_url=vault_url, credential=self.credential)
            secret = client.get_secret(secret_name)
        except AzureError as exc:
            raise KeyResolutionFailed(f"failed to get secret {secret_name!r} from Key Vault {vault_name!r}: {exc}") from exc
        if not secret.value:
            raise KeyResolutionFailed(f"secret {secret_name!r} in Key Vault {vault_name!r} has no value")
        try:
            return decode_key(secret.value, self.key_encoding)
        except (binascii.Error, ValueError) as exc:
            raise KeyResolutionFailed(f"secret {secret_name!r} is not valid {self.key_encoding} key material") from exc

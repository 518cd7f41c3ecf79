import argparse
import dataclasses
import logging
import sys

from pathlib import Path
from typing import Tuple

from crypto.aead import aead_encrypt, aead_decrypt
from storage.record import load_record, save_record
from utils.dataModels import Record
from utils.errors import MalformedInput, NBFileError, NothingToDecrypt
from utils.helper import b64d, b64e

logger = logging.getLogger(__name__)


def transition(record: Record, key: bytes) -> Tuple[Record, str]:
    """Encrypt when `data` is set, otherwise decrypt `encrypted_data`.

    Returns a new Record and the direction taken; `record` itself is left alone
    so a failure part-way through leaves nothing half-updated.
    """
    if record.data:
        encrypted = b64e(aead_encrypt(key, record.data.encode("utf-8")))
        return dataclasses.replace(record, encrypted_data=encrypted, data=""), "encrypt"

    if not record.encrypted_data:
        raise NothingToDecrypt("encrypted_data is empty, cannot decrypt")
    plaintext = aead_decrypt(key, b64d(record.encrypted_data))
    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInput("decrypted payload is not UTF-8 text") from exc
    if not text:
        # Clearing the ciphertext here would leave an empty record behind.
        logger.warning("decrypted payload is empty; keeping encrypted_data")
        return dataclasses.replace(record, data=""), "decrypt"
    return dataclasses.replace(record, encrypted_data="", data=text), "decrypt"


def toggle_file(path: Path, resolver, write: bool = True) -> Tuple[Record, str]:
    record = load_record(path)
    key = resolver.resolve_key(record.key_vault_name, record.secret_name)
    updated, direction = transition(record, key)
    logger.info("%s path completed for %s", direction, path)
    if write:
        save_record(path, updated)
    return updated, direction


def cmd_toggle(args: argparse.Namespace) -> None:
    from keyvault.resolver import AzureKeyVaultResolver, build_credential

    path = Path(args.path)
    try:
        resolver = AzureKeyVaultResolver(build_credential(args.credential), key_encoding=args.key_encoding)
        updated, direction = toggle_file(path, resolver, write=not args.dry_run)
    except NBFileError as exc:
        print(f"[!] {exc}")
        sys.exit(1)

    if args.dry_run:
        sys.stdout.write(updated.to_bytes().decode("utf-8"))
        return
    verb = "Encrypted" if direction == "encrypt" else "Decrypted"
    print(f"[+] {verb} {path}")


def cmd_init(args: argparse.Namespace) -> None:
    path = Path(args.path)
    if path.exists() and not args.force:
        print(f"[!] {path} exists. Use --force to overwrite.")
        sys.exit(1)

    data = args.data or ""
    if args.from_file:
        src = Path(args.from_file)
        if not src.is_file():
            print(f"[!] Not a file: {src}")
            sys.exit(1)
        try:
            data = src.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"[!] Cannot read {src}: {exc}")
            sys.exit(1)

    record = Record(key_vault_name=args.vault, secret_name=args.secret, data=data)
    try:
        save_record(path, record)
    except NBFileError as exc:
        print(f"[!] {exc}")
        sys.exit(1)
    print(f"[+] Initialized {path}")


def cmd_status(args: argparse.Namespace) -> None:
    path = Path(args.path)
    try:
        record = load_record(path)
    except NBFileError as exc:
        print(f"[!] {exc}")
        sys.exit(1)
    print(f"{path}\t{record.state}\t{record.key_vault_name}/{record.secret_name}")

#!/usr/bin/env python3
"""
nbvault – envelope encryption for .nb records backed by Azure Key Vault

A .nb file is a small JSON record:

    {
      "encrypted_data": "<base64>",
      "key_vault_name": "<vault>",
      "secret_name": "<secret>",
      "data": "<plaintext>"
    }

Each run resolves the AES key named by key_vault_name/secret_name and flips
the record: a non-empty `data` is encrypted into `encrypted_data` and cleared,
otherwise `encrypted_data` is decrypted back into `data` and cleared.

encrypted_data (after base64 decoding):
    nonce      : 12 bytes (fresh per encryption)
    ciphertext : len(data) bytes
    tag        : 16 bytes (AES-GCM)

Commands:
  toggle [path]        Encrypt or decrypt in place (default: test.json.nb)
  init <path>          Create a plaintext record pointing at a vault secret
  status <path>        Show plaintext/ciphertext state without touching Key Vault

Security choices:
  - AEAD: AES-GCM (128/192/256 by key length) via cryptography.hazmat
  - Key material never leaves memory; the file is replaced atomically
"""
from __future__ import annotations

import logging
import sys

from ui.cli import build_parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    args.func(args)


if __name__ == "__main__":
    main()

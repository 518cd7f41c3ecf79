import argparse

from utils.core import cmd_init, cmd_status, cmd_toggle
from utils.dataModels import (
    CREDENTIAL_KINDS,
    DEFAULT_CREDENTIAL,
    DEFAULT_KEY_ENCODING,
    DEFAULT_NB_FILE,
    KEY_ENCODINGS,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Toggle .nb records between plaintext and Key Vault encrypted form")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_tog = sub.add_parser("toggle", help="Encrypt or decrypt a .nb file in place")
    p_tog.add_argument("path", nargs="?", default=DEFAULT_NB_FILE, help=f"Path to .nb file (default: {DEFAULT_NB_FILE})")
    p_tog.add_argument("--key-encoding", choices=KEY_ENCODINGS, default=DEFAULT_KEY_ENCODING,
                       help="How the Key Vault secret encodes the AES key")
    p_tog.add_argument("--credential", choices=CREDENTIAL_KINDS, default=DEFAULT_CREDENTIAL,
                       help="Azure credential used to reach Key Vault")
    p_tog.add_argument("--dry-run", action="store_true", help="Print the resulting record instead of writing it")
    p_tog.set_defaults(func=cmd_toggle)

    p_init = sub.add_parser("init", help="Create a plaintext .nb file")
    p_init.add_argument("path", help="Path to .nb file")
    p_init.add_argument("--vault", required=True, help="Key Vault name")
    p_init.add_argument("--secret", required=True, help="Secret name holding the AES key")
    src = p_init.add_mutually_exclusive_group()
    src.add_argument("--data", help="Plaintext content")
    src.add_argument("--from-file", help="Read plaintext content from a file")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing file")
    p_init.set_defaults(func=cmd_init)

    p_st = sub.add_parser("status", help="Show whether a .nb file holds plaintext or ciphertext")
    p_st.add_argument("path", help="Path to .nb file")
    p_st.set_defaults(func=cmd_status)

    return p

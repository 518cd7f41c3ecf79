"""Tests for the .nb record codec and file storage."""

import json
import os
import stat
import sys

from pathlib import Path

import pytest

from storage.record import load_record, save_record
from utils.dataModels import Record
from utils.errors import MalformedInput, MalformedRecord, RecordIOError
from utils.helper import b64d, b64e


class TestRecordCodec:
    def test_from_bytes(self):
        record = Record.from_bytes(b'{"data":"hello","key_vault_name":"kv1","secret_name":"s1","encrypted_data":""}')
        assert record == Record(encrypted_data="", key_vault_name="kv1", secret_name="s1", data="hello")

    def test_missing_fields_default_empty(self):
        assert Record.from_bytes(b'{"key_vault_name": "kv1"}') == Record(key_vault_name="kv1")

    def test_null_field_is_empty(self):
        assert Record.from_bytes(b'{"data": null}').data == ""

    def test_unknown_fields_ignored(self):
        record = Record.from_bytes(b'{"data": "x", "comment": "ignored", "version": 3}')
        assert record.data == "x"
        assert "comment" not in json.loads(record.to_bytes())

    @pytest.mark.parametrize("raw", [b"", b"{not json", b"[1, 2]", b'"str"', b"\xff\xfe"])
    def test_malformed(self, raw):
        with pytest.raises(MalformedRecord, match="failed to parse"):
            Record.from_bytes(raw)

    def test_non_string_field(self):
        with pytest.raises(MalformedRecord, match="'data' must be a string"):
            Record.from_bytes(b'{"data": 42}')

    def test_to_bytes_is_stable_and_indented(self):
        out = Record(encrypted_data="abc", key_vault_name="kv1", secret_name="s1").to_bytes().decode()
        assert out == (
            "{\n"
            '  "encrypted_data": "abc",\n'
            '  "key_vault_name": "kv1",\n'
            '  "secret_name": "s1",\n'
            '  "data": ""\n'
            "}\n"
        )

    def test_unicode_kept_readable(self):
        record = Record(data="sekrit: \U0001f511")
        assert "\U0001f511" in record.to_bytes().decode("utf-8")
        assert Record.from_bytes(record.to_bytes()) == record

    def test_state(self):
        assert Record(data="x", encrypted_data="y").state == "plaintext"
        assert Record(encrypted_data="y").state == "ciphertext"
        assert Record().state == "empty"


class TestBase64:
    def test_standard_alphabet_no_wrapping(self):
        encoded = b64e(bytes(range(256)) * 2)
        assert "\n" not in encoded
        assert "-" not in encoded and "_" not in encoded
        assert b64d(encoded) == bytes(range(256)) * 2

    @pytest.mark.parametrize("text", ["not base64!", "abc", "YWJj\nZA==", "√√√√"])
    def test_invalid(self, text):
        with pytest.raises(MalformedInput, match="failed to decode ciphertext"):
            b64d(text)


class TestStorage:
    def test_load(self, nb_file: Path):
        assert load_record(nb_file).data == "hello"

    def test_load_missing(self, tmp_path: Path):
        with pytest.raises(RecordIOError, match="failed to read"):
            load_record(tmp_path / "missing.nb")

    def test_load_missing_is_oserror(self, tmp_path: Path):
        with pytest.raises(OSError):
            load_record(tmp_path / "missing.nb")

    def test_save_replaces_atomically(self, nb_file: Path):
        record = Record(encrypted_data="abc", key_vault_name="kv1", secret_name="s1")
        save_record(nb_file, record)
        assert load_record(nb_file) == record
        assert not (nb_file.parent / (nb_file.name + ".tmp")).exists()

    def test_save_into_missing_dir(self, tmp_path: Path):
        with pytest.raises(RecordIOError, match="failed to write"):
            save_record(tmp_path / "nope" / "x.nb", Record(data="x"))

    def test_failed_replace_keeps_original(self, nb_file: Path, monkeypatch):
        original = nb_file.read_bytes()

        def boom(src, dst):
            raise PermissionError("read-only")

        monkeypatch.setattr(os, "replace", boom)
        with pytest.raises(RecordIOError):
            save_record(nb_file, Record(data="changed"))
        assert nb_file.read_bytes() == original
        assert not (nb_file.parent / (nb_file.name + ".tmp")).exists()


class TestRecordCodecLimits:
    def test_lone_surrogate_rejected(self):
        with pytest.raises(MalformedRecord, match="'data' is not valid UTF-8"):
            Record.from_bytes(b'{"data": "\\ud800x", "key_vault_name": "kv1", "secret_name": "s1"}')

    def test_paired_surrogates_accepted(self):
        assert Record.from_bytes(b'{"data": "\\ud83d\\udd11"}').data == "\U0001f511"

    def test_to_bytes_rejects_lone_surrogate(self):
        with pytest.raises(MalformedRecord, match="not valid UTF-8"):
            Record(data="\ud800").to_bytes()

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no int digit limit")
    def test_oversized_int_in_unknown_field(self):
        with pytest.raises(MalformedRecord, match="failed to parse"):
            Record.from_bytes(b'{"data": "x", "n": ' + b"1" * 5000 + b"}")

    def test_deep_nesting(self):
        with pytest.raises(MalformedRecord, match="failed to parse"):
            Record.from_bytes(b"[" * 100000 + b"]" * 100000)


class TestStoragePermissions:
    def test_mode_preserved(self, nb_file: Path):
        nb_file.chmod(0o600)
        save_record(nb_file, Record(encrypted_data="abc"))
        assert stat.S_IMODE(nb_file.stat().st_mode) == 0o600

    def test_symlink_written_through(self, nb_file: Path):
        link = nb_file.parent / "link.nb"
        link.symlink_to(nb_file)
        save_record(link, Record(encrypted_data="abc"))
        assert link.is_symlink()
        assert load_record(nb_file).encrypted_data == "abc"

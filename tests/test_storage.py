# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

import json
import os
import stat
import sys
from pathlib import Path

import pytest

from coreason_oidc_client.storage import FileStorage, MemoryStorage


def test_memory_storage_roundtrip() -> None:
    storage = MemoryStorage()
    assert storage.get_item("missing") is None

    storage.set_item("oidc-client:1", "{}")
    assert storage.get_item("oidc-client:1") == "{}"
    assert storage.keys() == ["oidc-client:1"]

    storage.remove_item("oidc-client:1")
    storage.remove_item("oidc-client:1")
    assert storage.get_item("oidc-client:1") is None


def test_file_storage_creates_parent_directory(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "storage.json"
    storage = FileStorage(path)

    assert storage.get_item("k") is None
    assert not path.exists()

    storage.set_item("k", "v")
    assert json.loads(path.read_text()) == {"k": "v"}


def test_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    FileStorage(path).set_item("oidc-client:abc", '{"id": "abc"}')
    FileStorage(path).set_item("oidc-client:def", '{"id": "def"}')

    reopened = FileStorage(str(path))
    assert reopened.get_item("oidc-client:abc") == '{"id": "abc"}'
    assert sorted(reopened.keys()) == ["oidc-client:abc", "oidc-client:def"]


def test_file_storage_remove(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "storage.json")
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.remove_item("a")
    storage.remove_item("missing")

    assert storage.keys() == ["b"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_file_storage_permissions(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    FileStorage(path).set_item("k", "v")

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_file_storage_leaves_no_temp_files(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "storage.json")
    storage.set_item("k", "v")
    storage.set_item("k", "w")

    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


def test_file_storage_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json")
    storage = FileStorage(path)

    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"


def test_file_storage_ignores_non_object(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2]")

    assert FileStorage(path).keys() == []


def test_file_storage_moves_corrupt_file_aside_before_write(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    original = '{"oidc-client:old": "x",'
    path.write_text(original)

    FileStorage(path).set_item("oidc-client:new", "y")

    assert (tmp_path / "storage.json.corrupt").read_text() == original
    assert json.loads(path.read_text()) == {"oidc-client:new": "y"}


def test_file_storage_remove_preserves_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2]")

    FileStorage(path).remove_item("k")

    assert (tmp_path / "storage.json.corrupt").read_text() == "[1, 2]"
    assert not path.exists()

"""Tests for the store_utils maintenance CLI."""

import pytest

import store_utils
from storefront.user_store import UserStore


@pytest.fixture
def saved_users(users_file):
    store = UserStore(users_file).load()
    store.register("alice@shophub.com", "wonderland", "Alice")
    return users_file


def test_stats_without_users_file(users_file, capsys):
    assert store_utils.main(["stats", "--users-file", str(users_file)]) == 0
    out = capsys.readouterr().out
    assert "Products:    12" in out
    assert "missing" in out


def test_users_lists_registered(saved_users, capsys):
    store_utils.main(["users", "--users-file", str(saved_users)])
    out = capsys.readouterr().out
    assert "alice@shophub.com" in out
    assert "demo@shophub.com" in out


def test_products(capsys):
    store_utils.main(["products"])
    assert "Running Shoes" in capsys.readouterr().out


def test_backup(saved_users, tmp_path):
    backup_dir = tmp_path / "backups"
    code = store_utils.main(["backup", "--users-file", str(saved_users), "--backup-dir", str(backup_dir)])

    assert code == 0
    copies = list(backup_dir.iterdir())
    assert len(copies) == 1
    assert copies[0].read_text() == saved_users.read_text()


def test_backup_missing_file(users_file, tmp_path):
    code = store_utils.main(["backup", "--users-file", str(users_file), "--backup-dir", str(tmp_path / "b")])
    assert code == 1


def test_reset_with_yes(saved_users):
    assert store_utils.main(["reset", "--users-file", str(saved_users), "-y"]) == 0
    assert not saved_users.exists()


def test_reset_aborted(saved_users, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "no")
    assert store_utils.main(["reset", "--users-file", str(saved_users)]) == 1
    assert saved_users.exists()

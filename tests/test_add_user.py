import builtins

import add_user
from myreps import accounts


def _answers(monkeypatch, inputs, passwords):
    inputs = iter(inputs)
    passwords = iter(passwords)
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(inputs))
    monkeypatch.setattr(add_user, "getpass", lambda prompt="": next(passwords))


def test_add_admin_user(monkeypatch, data_dir, capsys):
    _answers(monkeypatch, ["Coach@Example.com", "Coach", "admin"], ["secret123", "secret123"])

    add_user.main(data_dir)

    assert "added with role 'admin'" in capsys.readouterr().out
    assert accounts.get_user(data_dir, "coach@example.com")["role"] == "admin"


def test_add_user_password_mismatch(monkeypatch, data_dir, capsys):
    _answers(monkeypatch, ["bo@example.com", "Bo"], ["secret123", "other123"])

    add_user.main(data_dir)

    assert "Passwords do not match." in capsys.readouterr().out
    assert accounts.get_user(data_dir, "bo@example.com") is None


def test_add_existing_user(monkeypatch, data_dir, profile, capsys):
    _answers(monkeypatch, ["ana@example.com"], [])

    add_user.main(data_dir)

    assert "already exists" in capsys.readouterr().out

import importlib
import os

import apps.shared.database as database


def test_settings_are_read_from_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("MONGO_DB_NAME=blogs_from_dotenv\nMONGO_TIMEOUT_MS=1234\n")
    monkeypatch.delenv("MONGO_DB_NAME", raising=False)
    monkeypatch.delenv("MONGO_TIMEOUT_MS", raising=False)
    monkeypatch.chdir(tmp_path)

    try:
        importlib.reload(database)
        assert database.MONGO_DB_NAME == "blogs_from_dotenv"
        assert database.MONGO_TIMEOUT_MS == 1234
    finally:
        os.environ.pop("MONGO_DB_NAME", None)
        os.environ.pop("MONGO_TIMEOUT_MS", None)
        monkeypatch.undo()
        importlib.reload(database)


def test_environment_wins_over_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("MONGO_DB_NAME=blogs_from_dotenv\n")
    monkeypatch.setenv("MONGO_DB_NAME", "blogs_from_env")
    monkeypatch.chdir(tmp_path)

    try:
        importlib.reload(database)
        assert database.MONGO_DB_NAME == "blogs_from_env"
    finally:
        monkeypatch.undo()
        importlib.reload(database)

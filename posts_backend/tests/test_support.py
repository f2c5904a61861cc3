import json
import random
from dataclasses import replace

from fastapi.testclient import TestClient
from typer.testing import CliRunner

from src.api import main
from src.api.generate_openapi import generate_openapi
from src.api.repositories import InMemoryRepository, get_repository
from src.api.seed import cli, make_post_payload, seed_posts
from src.api.settings import load_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ["PERSISTENCE_BACKEND", "SQLITE_DB_PATH", "CORS_ALLOW_ORIGINS", "API_TOKENS", "LOG_LEVEL", "SEED_POSTS"]:
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.persistence_backend == "memory"
        assert settings.sqlite_db_path == "./data/posts.db"
        assert settings.cors_allow_origins == ["*"]
        assert settings.api_tokens == []
        assert settings.log_level == "INFO"
        assert settings.seed_posts == 0

    def test_parses_env(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
        monkeypatch.setenv("API_TOKENS", " a, b ,,")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test,http://b.test")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("SEED_POSTS", "3")
        settings = load_settings()
        assert settings.persistence_backend == "sqlite"
        assert settings.api_tokens == ["a", "b"]
        assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert settings.log_level == "DEBUG"
        assert settings.seed_posts == 3

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        monkeypatch.setenv("SEED_POSTS", "many")
        settings = load_settings()
        assert settings.persistence_backend == "memory"
        assert settings.seed_posts == 0


class TestSeed:
    def test_payload_word_counts(self):
        payload = make_post_payload(random.Random(7))
        assert len(payload.title.split()) == 5
        assert len(payload.content.split()) == 50

    def test_seed_posts(self):
        repo = InMemoryRepository()
        created = seed_posts(repo, 3, random.Random(1))
        assert len(created) == 3
        assert [p["id"] for p in repo.list()] == [p["id"] for p in created]

    def test_cli(self):
        result = CliRunner().invoke(cli, ["--count", "2", "--seed", "1"])
        assert result.exit_code == 0
        assert "Created 2 posts" in result.output


def test_generate_openapi(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))
    with open(out, encoding="utf-8") as f:
        schema = json.load(f)
    assert "/api/v1/posts" in schema["paths"]
    assert "/api/v1/posts/{post_id}" in schema["paths"]
    assert {t["name"] for t in schema["tags"]} >= {"health", "posts"}


def test_startup_seeds_posts(monkeypatch):
    monkeypatch.setattr(main, "_settings", replace(main._settings, seed_posts=3))
    repo = InMemoryRepository()
    main.app.dependency_overrides[get_repository] = lambda: repo
    try:
        with TestClient(main.app) as client:
            assert len(client.get("/api/v1/posts").json()) == 3
    finally:
        main.app.dependency_overrides.clear()

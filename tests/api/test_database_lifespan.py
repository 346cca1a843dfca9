"""
tests.api.test_database_lifespan

Purpose:
    The app opens (and checks) a database engine at startup only when a
    database is configured.
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import create_engine

import nexusqr.api.main as api_main


def test_no_database_configured_means_no_engine(app_factory) -> None:
    app = app_factory()
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert app.state.db_engine is None


def test_configured_database_is_checked_at_startup(app_factory, monkeypatch, tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'app.db'}")
    seen_urls: list[str] = []
    checked: list[object] = []

    def fake_create_db_engine(url: str):
        seen_urls.append(url)
        return engine

    def recording_check(e) -> None:
        checked.append(e)

    monkeypatch.setattr(api_main, "create_db_engine", fake_create_db_engine)
    monkeypatch.setattr(api_main, "check_connection", recording_check)

    app = app_factory(db_username="app", db_password="pw", db_database="nexusqr")
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert app.state.db_engine is engine

    assert seen_urls == ["postgresql://app:pw@localhost:5432/nexusqr"]
    assert checked == [engine]

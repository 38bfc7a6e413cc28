import pytest

from config.settings import Settings
from interview.errors import MissingTokenError
from interview.models import ReportArtifact
from services.reports import report_filename, save_report
from services.sessions import (
    FileTokenStore,
    MemoryTokenStore,
    default_token_store,
    logout,
    open_session,
)


def test_memory_token_store_round_trip():
    store = MemoryTokenStore()
    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"
    store.clear()
    assert store.get() is None


def test_file_token_store_persists_and_clears(tmp_path):
    path = tmp_path / "nested" / "token"
    store = FileTokenStore(path)
    assert store.get() is None
    store.set("  abc  ")
    assert FileTokenStore(path).get() == "abc"
    logout(store)
    assert not path.exists()
    store.clear()


def test_default_store_prefers_configured_token(tmp_path):
    cfg = Settings(_env_file=None, AUTH_TOKEN="env-token", TOKEN_FILE=str(tmp_path / "token"))
    assert isinstance(default_token_store(cfg), MemoryTokenStore)
    cfg = Settings(_env_file=None, AUTH_TOKEN=None, TOKEN_FILE=str(tmp_path / "token"))
    assert isinstance(default_token_store(cfg), FileTokenStore)


def test_gate_rejects_missing_token(test_settings):
    with pytest.raises(MissingTokenError):
        open_session(MemoryTokenStore(), cfg=test_settings)


def test_gate_builds_session_and_bearer_follows_store(test_settings):
    store = MemoryTokenStore("tok")
    session = open_session(store, cfg=test_settings)
    assert session.service.route.base_url == "http://testserver"
    assert session.bearer() == "tok"
    store.clear()
    with pytest.raises(MissingTokenError):
        session.bearer()
    assert session.peek_token() is None


def test_report_filename_and_save(tmp_path):
    assert report_filename("Soap") == "Soap_transparency_report.pdf"
    assert report_filename("a/b") == "a_b_transparency_report.pdf"
    artifact = ReportArtifact(filename=report_filename("Soap"), content=b"%PDF-1.4")
    path = save_report(artifact, tmp_path / "out")
    assert path.name == "Soap_transparency_report.pdf"
    assert path.read_bytes() == b"%PDF-1.4"

from pathlib import Path

import lens_cli
from services.sessions import MemoryTokenStore


def _prompt(answers):
    feed = iter(answers)

    def _next(label: str) -> str:
        return next(feed)

    return _next


def test_full_interview_saves_report(backend, test_settings, capsys):
    backend.batches = [["Where are the ingredients sourced?"], ["Is packaging recyclable?"], []]
    code = lens_cli.run_interview(
        cfg=test_settings,
        token_store=MemoryTokenStore("tok"),
        client=backend.client,
        prompt=_prompt(["Soap", "3", "Local farms", "", "Yes, fully", "y", "n"]),
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "Please provide an answer before proceeding." in out
    assert "Transparency Score: 82" in out
    assert "Excellent transparency practices" in out
    assert backend.calls("create")[0][1]["category"] == "Cosmetics"
    assert backend.calls("score")[0][1] == {
        "Where are the ingredients sourced?": "Local farms",
        "Is packaging recyclable?": "Yes, fully",
    }
    report = Path(test_settings.REPORT_DIR) / "Soap_transparency_report.pdf"
    assert report.read_bytes() == backend.report_bytes


def test_failed_fetch_offers_retry(backend, test_settings, capsys):
    backend.failures["generate"] = (500, {"error": "Generator offline"})
    answers = ["Kettle", "electronics", "r", "g", "n"]

    code = lens_cli.run_interview(
        cfg=test_settings,
        token_store=MemoryTokenStore("tok"),
        client=backend.client,
        prompt=_prompt(answers),
        download=False,
    )
    out = capsys.readouterr().out
    assert code == 0
    assert out.count("Could not fetch the next question: Generator offline") == 2
    assert backend.calls("score")[0][1] == {}
    assert backend.calls("create")[0][1]["category"] == "Electronics"


def test_missing_token_exits_with_error(test_settings, capsys):
    code = lens_cli.run_interview(cfg=test_settings, token_store=MemoryTokenStore(), prompt=_prompt([]))
    assert code == 1
    assert "Please log in first." in capsys.readouterr().out


def test_token_commands_use_token_file(tmp_path, monkeypatch, capsys):
    from config.settings import Settings

    cfg = Settings(_env_file=None, AUTH_TOKEN=None, TOKEN_FILE=str(tmp_path / "token"))
    monkeypatch.setattr(lens_cli, "settings", cfg)

    assert lens_cli.main(["token", "set", "abc"]) == 0
    assert (tmp_path / "token").read_text() == "abc"
    assert lens_cli.main(["token", "clear"]) == 0
    assert not (tmp_path / "token").exists()
    out = capsys.readouterr().out
    assert "Token stored." in out and "Logged out." in out

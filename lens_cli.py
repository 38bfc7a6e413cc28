"""Command-line front end for running a transparency interview."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from config.settings import Settings, settings
from gateway import HttpClient
from interview import CATEGORIES, InterviewError, MissingTokenError
from interview.driver import InterviewDriver
from services.reports import save_report
from services.sessions import TokenStore, default_token_store, logout, open_session

Prompt = Callable[[str], str]


def _choose_category(prompt: Prompt) -> str:
    print("Categories: " + ", ".join(f"{index + 1}) {name}" for index, name in enumerate(CATEGORIES)))
    raw = prompt("Category [1]: ").strip()
    if not raw:
        return CATEGORIES[0]
    if raw.isdigit() and 1 <= int(raw) <= len(CATEGORIES):
        return CATEGORIES[int(raw) - 1]
    for name in CATEGORIES:
        if name.lower() == raw.lower():
            return name
    print(f"Unknown category {raw!r}, using {CATEGORIES[0]}.")
    return CATEGORIES[0]


def _foundation(driver: InterviewDriver, prompt: Prompt) -> bool:
    while True:
        name = prompt("Product name: ").strip()
        if not name:
            print("Product name is required.")
            if prompt("Try again? [Y/n] ").strip().lower() == "n":
                return False
            continue
        driver.set_foundation(name=name, category=_choose_category(prompt))
        try:
            driver.submit_foundation()
            return True
        except MissingTokenError:
            raise
        except InterviewError as exc:
            print(f"Error creating product: {exc}")
            if driver.phase == "interviewing":
                # the product exists; scoring on immediate exhaustion failed
                return True
            if prompt("Try again? [Y/n] ").strip().lower() == "n":
                return False


def _interview(driver: InterviewDriver, prompt: Prompt) -> bool:
    while driver.phase == "interviewing":
        snap = driver.snapshot()
        question = driver.current_question
        if question is None:
            if snap.last_error:
                print(f"Could not fetch the next question: {snap.last_error}")
                choice = prompt("[r]etry, [g]enerate report, [q]uit: ").strip().lower()
            else:
                print("Interview complete.")
                choice = prompt("[g]enerate report, [q]uit: ").strip().lower() or "g"
            try:
                if choice == "r":
                    driver.request_next_question()
                elif choice == "g":
                    driver.finalize_report()
                elif choice == "q":
                    return False
            except InterviewError as exc:
                print(f"Error saving answers: {exc}")
            continue

        print(f"\n[{len(snap.asked)}/{driver.session.settings.EXPECTED_QUESTIONS}] {question}")
        answer = prompt("> ")
        if not answer.strip():
            print("Please provide an answer before proceeding.")
            continue
        try:
            driver.submit_answer(answer)
        except InterviewError as exc:
            print(f"Error saving answers: {exc}")
    return driver.phase == "reporting"


def _report(driver: InterviewDriver, prompt: Prompt, report_dir: Path, download: Optional[bool]) -> None:
    snap = driver.snapshot()
    score = snap.score if snap.score is not None else 0
    print(f"\nTransparency Score: {score:g}")
    print(snap.classification or "")
    if download is None:
        download = prompt("Download full report? [Y/n] ").strip().lower() != "n"
    if not download:
        return
    try:
        artifact = driver.fetch_report()
    except InterviewError as exc:
        print(f"Error downloading report: {exc}")
        return
    path = save_report(artifact, report_dir)
    print(f"Report saved to {path}")


def run_interview(
    *,
    cfg: Settings = settings,
    token_store: Optional[TokenStore] = None,
    client: Optional[HttpClient] = None,
    prompt: Prompt = input,
    download: Optional[bool] = None,
) -> int:
    """Run interviews until the respondent declines another analysis."""

    try:
        session = open_session(token_store, cfg=cfg, client=client)
    except MissingTokenError as exc:
        print(str(exc))
        return 1
    driver = InterviewDriver(session)
    report_dir = Path(cfg.REPORT_DIR)
    try:
        while True:
            if not _foundation(driver, prompt):
                return 0
            if not _interview(driver, prompt):
                return 0
            _report(driver, prompt, report_dir, download)
            if prompt("Start a new analysis? [y/N] ").strip().lower() != "y":
                return 0
            driver.reset()
    except MissingTokenError as exc:
        print(str(exc))
        return 1
    except EOFError:
        print()
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="transparency-lens", description="Guided product transparency interviews")
    sub = parser.add_subparsers(dest="command", required=True)

    run_parser = sub.add_parser("run", help="Run an interactive interview")
    run_parser.add_argument("--base-url", help="Override API_BASE_URL")
    run_parser.add_argument("--report-dir", help="Override REPORT_DIR")
    run_parser.add_argument("--no-download", action="store_true", help="Skip the report download prompt")

    token_parser = sub.add_parser("token", help="Manage the stored bearer token")
    token_sub = token_parser.add_subparsers(dest="action", required=True)
    set_parser = token_sub.add_parser("set", help="Store a token")
    set_parser.add_argument("token")
    token_sub.add_parser("clear", help="Forget the stored token (log out)")

    args = parser.parse_args(argv)

    if args.command == "token":
        store = default_token_store(settings)
        if args.action == "set":
            store.set(args.token)
            print("Token stored.")
        else:
            logout(store)
            print("Logged out.")
        return 0

    cfg = settings.model_copy()
    if args.base_url:
        cfg.API_BASE_URL = args.base_url
    if args.report_dir:
        cfg.REPORT_DIR = args.report_dir
    return run_interview(cfg=cfg, download=False if args.no_download else None)


if __name__ == "__main__":
    sys.exit(main())

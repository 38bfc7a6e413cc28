"""Helpers for naming and saving downloaded report artifacts."""
from __future__ import annotations

import re
from pathlib import Path

from interview.models import ReportArtifact

_UNSAFE = re.compile(r"[\\/\x00]")


def report_filename(name: str) -> str:
    safe = _UNSAFE.sub("_", name.strip()) or "product"
    return f"{safe}_transparency_report.pdf"


def save_report(artifact: ReportArtifact, directory: Path) -> Path:
    """Write the artifact bytes untouched and return the file path."""

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / artifact.filename
    target.write_bytes(artifact.content)
    return target


__all__ = ["report_filename", "save_report"]

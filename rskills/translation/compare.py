"""Structural comparison between an original and a translated markdown tree.

The check is a heuristic: it does not read the prose, it only compares
line counts, ``#`` header lines and triple-backtick fence lines of files
with the same relative path. A translation that drops a section or a code
sample usually shows up as a header/fence mismatch or a large line delta.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from rskills.core.errors import InvalidDirectoryError

logger = logging.getLogger(__name__)

DEFAULT_LINE_DELTA_THRESHOLD = 50
DEFAULT_PATTERN = "*.md"
REPORT_PREFIX = "translation-comparison"

FENCE = "```"


@dataclass(frozen=True)
class TextStats:
    """Line, header and code-fence counts for one file."""
    lines: int = 0
    headers: int = 0
    code_fences: int = 0


def count_stats_text(text: str) -> TextStats:
    """Count stats for already-loaded text.

    ``lines`` follows ``wc -l``: the number of newline characters, so a
    final line without a trailing newline is not counted.
    """
    headers = 0
    fences = 0
    for line in text.split("\n"):
        if line.startswith("#"):
            headers += 1
        if line.startswith(FENCE):
            fences += 1
    return TextStats(lines=text.count("\n"), headers=headers, code_fences=fences)


def count_stats(path: Path) -> TextStats:
    """Count stats for a file on disk."""
    text = path.read_text(encoding="utf-8", errors="replace")
    return count_stats_text(text)


@dataclass
class FileComparison:
    """Comparison result for one file of the original tree."""
    rel_path: str
    missing: bool = False
    original: TextStats = field(default_factory=TextStats)
    translated: TextStats = field(default_factory=TextStats)
    line_delta_threshold: int = DEFAULT_LINE_DELTA_THRESHOLD

    @property
    def line_delta(self) -> int:
        """Original minus translated line count."""
        return self.original.lines - self.translated.lines

    @property
    def diff_percent(self) -> Optional[float]:
        if self.missing or self.original.lines <= 0:
            return None
        return (self.translated.lines - self.original.lines) / self.original.lines * 100

    @property
    def structural_mismatch(self) -> bool:
        if self.missing:
            return False
        return (
            self.original.headers != self.translated.headers
            or self.original.code_fences != self.translated.code_fences
        )

    @property
    def significant_line_delta(self) -> bool:
        if self.missing or self.original.lines <= 0:
            return False
        return abs(self.line_delta) > self.line_delta_threshold

    @property
    def status(self) -> str:
        if self.missing:
            return "missing"
        if self.structural_mismatch or self.significant_line_delta:
            return "warning"
        return "ok"


@dataclass
class ComparisonReport:
    """All per-file comparisons plus files only present in the translation."""
    original_dir: Path
    translated_dir: Path
    generated_at: datetime = field(default_factory=lambda: datetime.now().astimezone())
    files: list[FileComparison] = field(default_factory=list)
    extra_files: list[str] = field(default_factory=list)

    @property
    def missing(self) -> list[FileComparison]:
        return [f for f in self.files if f.status == "missing"]

    @property
    def warnings(self) -> list[FileComparison]:
        return [f for f in self.files if f.status == "warning"]

    @property
    def ok_count(self) -> int:
        return sum(1 for f in self.files if f.status == "ok")

    @property
    def has_problems(self) -> bool:
        return bool(self.missing or self.warnings or self.extra_files)


def _validate_dir(value: Optional[Path | str], label: str) -> Path:
    if value is None or str(value) == "":
        raise InvalidDirectoryError("Usage: rskills compare <original_dir> <translated_dir>")
    path = Path(value)
    if not path.is_dir():
        raise InvalidDirectoryError(f"Error: Both directories must exist ({label} not found: {path})")
    return path


def _iter_documents(root: Path, pattern: str) -> Iterator[tuple[str, Path]]:
    """Yield ``(posix relative path, path)`` for matching files, sorted."""
    found = [p for p in root.rglob(pattern) if p.is_file()]
    for path in sorted(found, key=lambda p: p.relative_to(root).as_posix()):
        yield path.relative_to(root).as_posix(), path


def compare_trees(
    original_dir: Optional[Path | str],
    translated_dir: Optional[Path | str],
    *,
    line_delta_threshold: int = DEFAULT_LINE_DELTA_THRESHOLD,
    pattern: str = DEFAULT_PATTERN,
) -> ComparisonReport:
    """
    Compare every document of ``original_dir`` with its translation.

    Args:
        original_dir: Tree of source-language documents
        translated_dir: Tree of translated documents with the same layout
        line_delta_threshold: Absolute line delta above which a file is flagged
        pattern: Glob selecting the documents to compare

    Returns:
        ComparisonReport with one entry per original document

    Raises:
        InvalidDirectoryError: If either directory is missing or not a directory
    """
    original = _validate_dir(original_dir, "original")
    translated = _validate_dir(translated_dir, "translation")

    report = ComparisonReport(original_dir=original, translated_dir=translated)

    for rel_path, original_file in _iter_documents(original, pattern):
        translated_file = translated / rel_path
        if not translated_file.is_file():
            logger.debug("Missing translation: %s", rel_path)
            report.files.append(
                FileComparison(rel_path=rel_path, missing=True, line_delta_threshold=line_delta_threshold)
            )
            continue

        comparison = FileComparison(
            rel_path=rel_path,
            original=count_stats(original_file),
            translated=count_stats(translated_file),
            line_delta_threshold=line_delta_threshold,
        )
        if comparison.status == "warning":
            logger.debug("Structural warning for %s", rel_path)
        report.files.append(comparison)

    for rel_path, _ in _iter_documents(translated, pattern):
        if not (original / rel_path).is_file():
            report.extra_files.append(rel_path)

    logger.info(
        "Compared %d files: %d missing, %d warnings, %d extra",
        len(report.files), len(report.missing), len(report.warnings), len(report.extra_files),
    )
    return report


def _date_string(moment: datetime) -> str:
    """Format like date(1): ``Tue Mar  5 14:07:09 UTC 2024``."""
    return f"{moment:%a %b} {moment.day:>2} {moment:%H:%M:%S} {moment.tzname()} {moment:%Y}"


def render_markdown(report: ComparisonReport, saved_to: Optional[Path] = None) -> str:
    """Render a report as markdown."""
    generated = report.generated_at if report.generated_at.tzinfo else report.generated_at.astimezone()
    out: list[str] = [
        "# Translation Comparison Report",
        "",
        f"Generated: {_date_string(generated)}",
        "",
        f"- Original: {report.original_dir}",
        f"- Translation: {report.translated_dir}",
        "",
        "---",
        "",
    ]

    for comp in report.files:
        out.append(f"## File: {comp.rel_path}")
        out.append("")
        if comp.missing:
            out.append("**STATUS: MISSING TRANSLATION**")
            out.append("")
            continue

        out.append(f"- Original lines: {comp.original.lines}")
        out.append(f"- Translated lines: {comp.translated.lines}")
        if comp.diff_percent is not None:
            out.append(f"- Difference: {comp.diff_percent:.1f}%")
        out.append(f"- Headers (original/translated): {comp.original.headers} / {comp.translated.headers}")
        out.append(
            f"- Code blocks (original/translated): {comp.original.code_fences} / {comp.translated.code_fences}"
        )
        if comp.structural_mismatch:
            out.append("")
            out.append("**WARNING: Structural differences detected**")
        if comp.significant_line_delta:
            out.append("")
            out.append(f"**WARNING: Significant line count difference ({comp.line_delta} lines)**")
        out.append("")

    out.extend(["---", "", "## Files only in translation directory", ""])
    if report.extra_files:
        out.extend(f"- {rel}" for rel in report.extra_files)
    else:
        out.append("*None found*")
    out.extend(["", "---", ""])

    if saved_to is not None:
        out.append(f"Report saved to: {saved_to}")

    return "\n".join(out) + "\n"


def default_report_path(report: ComparisonReport, report_dir: Optional[Path] = None) -> Path:
    """``<dir>/translation-comparison-YYYYmmdd-HHMMSS.md``; a fresh temp dir when no dir is given.

    An existing report in ``report_dir`` is never reused: a ``-2``, ``-3``, ...
    suffix is added until the name is free.
    """
    directory = Path(report_dir) if report_dir else Path(tempfile.mkdtemp())
    stamp = report.generated_at.strftime("%Y%m%d-%H%M%S")
    path = directory / f"{REPORT_PREFIX}-{stamp}.md"
    counter = 2
    while path.exists():
        path = directory / f"{REPORT_PREFIX}-{stamp}-{counter}.md"
        counter += 1
    return path


def write_report(
    report: ComparisonReport,
    output: Optional[Path] = None,
    report_dir: Optional[Path] = None,
) -> Path:
    """
    Render ``report`` and write it to disk.

    Args:
        report: Report to write
        output: Exact file to write; overrides ``report_dir``
        report_dir: Directory for a timestamped report file

    Returns:
        Path of the written report
    """
    path = Path(output) if output else default_report_path(report, report_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_markdown(report, saved_to=path), encoding="utf-8")
    logger.info("Report saved to %s", path)
    return path

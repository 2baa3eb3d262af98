"""Render pytest JUnit XML reports as GitHub Actions annotations."""

from __future__ import annotations

import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .errors import ReportError

# Typical pytest traceback fragment: File "/path/to/test.py", line 12
FILE_LINE_RE = re.compile(r'File "([^"]+)", line (\d+)')

Location = Tuple[Optional[Path], Optional[int]]


def first_child(case: ET.Element, names: Tuple[str, ...]) -> Optional[ET.Element]:
    for child in case:
        if child.tag in names:
            return child
    return None


def case_label(case: ET.Element) -> str:
    classname = case.get("classname")
    name = case.get("name")
    if classname and name:
        return f"{classname}.{name}"
    if name:
        return name
    return "(unknown test)"


def pick_message(node: ET.Element, default: str) -> str:
    message = (node.get("message") or "").strip()
    if message:
        return message
    for line in "".join(node.itertext()).strip().splitlines():
        if line.strip():
            return line.strip()
    return default


def _parse_line(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def derive_location(case: ET.Element, body: Optional[str]) -> Location:
    """Prefer ``file``/``line`` attributes, then the first traceback frame in *body*."""
    file_attr = case.get("file")
    line_attr = _parse_line(case.get("line"))
    if file_attr is not None or line_attr is not None:
        return (Path(file_attr) if file_attr is not None else None), line_attr

    if body:
        match = FILE_LINE_RE.search(body)
        if match:
            return Path(match.group(1)), _parse_line(match.group(2))

    return None, None


def escape_for_github(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _display_file(file: Path, cwd: Path) -> str:
    if not file.is_absolute():
        return str(file)
    try:
        return os.path.relpath(file, cwd)
    except ValueError:
        return str(file)


def build_annotation(
    level: str,
    file: Optional[Path],
    line: Optional[int],
    message: str,
    cwd: Path,
) -> str:
    parts: List[str] = []
    if file is not None:
        parts.append(f"file={_display_file(file, cwd)}")
    if line is not None:
        parts.append(f"line={line}")

    prefix = f"::{level}"
    if parts:
        prefix += " " + ",".join(parts)
    return f"{prefix}::{escape_for_github(message)}"


def format_junit(
    report: Path,
    include_skipped: bool = False,
    cwd: Optional[Path] = None,
    echo: Callable[[str], None] = print,
) -> int:
    """Emit one annotation per failing (and optionally skipped) test case.

    Returns the number of annotations written.
    """
    try:
        tree = ET.parse(report)
    except OSError as exc:
        raise ReportError(f"Failed to read {report}: {exc}") from exc
    except ET.ParseError as exc:
        raise ReportError(f"Failed to parse XML in {report}: {exc}") from exc

    cwd = cwd or Path.cwd()
    reported = 0

    for case in tree.getroot().iter("testcase"):
        child = first_child(case, ("failure", "error"))
        if child is not None:
            level, fallback = "error", "Test failed"
        elif include_skipped:
            child = first_child(case, ("skipped",))
            if child is None:
                continue
            level, fallback = "warning", "Test skipped"
        else:
            continue

        file, line = derive_location(case, "".join(child.itertext()))
        message = f"{case_label(case)}: {pick_message(child, fallback)}"
        echo(build_annotation(level, file, line, message, cwd))
        reported += 1

    return reported

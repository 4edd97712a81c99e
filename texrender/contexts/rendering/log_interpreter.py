"""
TeX Log Interpretation

Reads the log file the typesetting executable leaves in the working directory
and answers two questions: does the document need another pass, and why did a
failed pass fail.

The log format belongs to the executable. The patterns below match what
pdflatex-family engines write; a change in that format shows up as an
UnexpectedLogStateError rather than a silent success.
"""

import re
from pathlib import Path
from typing import List

from texrender.contexts.rendering.exceptions import (
    CompilationError,
    RenderError,
    UnexpectedLogStateError,
)
from texrender.contexts.rendering.logger import _log_debug

# e.g. "Label(s) may have changed. Rerun to get cross-references right."
RERUN_PATTERN = re.compile(r"Rerun to get")

# "! Undefined control sequence." and the "<*> \badcmd" context line
ERROR_PATTERN = re.compile(r"^!.*|^<\*>")

ERROR_SEPARATOR = "|"

WARNING_PATTERNS = [
    re.compile(r"LaTeX Warning: (.+)"),
    re.compile(r"Package \w+ Warning: (.+)"),
    re.compile(r"(Overfull \\hbox \(.+\).*)"),
    re.compile(r"(Underfull \\hbox \(.+\).*)"),
]


def log_path(workdir: Path, jobname: str) -> Path:
    """Path of the log file for a job."""
    return Path(workdir) / f"{jobname}.log"


def read_log(path: Path) -> str:
    """
    Read a log file.

    TeX writes logs in whatever encoding the fonts and input used, so read as
    latin-1, which never fails to decode.
    """
    return Path(path).read_text(encoding="latin-1")


def needs_rerun(workdir: Path, jobname: str) -> bool:
    """
    Check whether the log asks for another pass.

    A missing or unreadable log means no rerun: the exit status, not this
    check, reports failures.
    """
    path = log_path(workdir, jobname)
    try:
        with open(path, "r", encoding="latin-1") as f:
            for line in f:
                if RERUN_PATTERN.search(line):
                    return True
    except OSError as e:
        _log_debug(f"Could not read {path} for rerun check, assuming no rerun: {e}")
    return False


def collect_errors(log_text: str) -> List[str]:
    """Error marker lines from a log, stripped, in the order encountered."""
    return [line.strip() for line in log_text.splitlines() if ERROR_PATTERN.match(line)]


def collect_warnings(log_text: str) -> List[str]:
    """
    Warning messages from a log.

    Warnings never fail a render; they are reported to the caller.
    """
    warnings = []
    for line in log_text.splitlines():
        for pattern in WARNING_PATTERNS:
            match = pattern.search(line)
            if match:
                warnings.append(match.group(1).strip())
                break
    return warnings


def diagnose(workdir: Path, jobname: str, returncode: int) -> RenderError:
    """
    Build the error for a failed pass from its log.

    Args:
        workdir: Working directory of the failed pass
        jobname: Job name the executable ran with
        returncode: Exit status of the failed pass

    Returns:
        CompilationError carrying the log's error lines joined with ERROR_SEPARATOR,
        or UnexpectedLogStateError if the log is unreadable or names no error
    """
    path = log_path(workdir, jobname)
    try:
        log_text = read_log(path)
    except OSError as e:
        return UnexpectedLogStateError(
            f"Executable exited with status {returncode} and its log could not be read "
            f"({path}: {e.strerror or e})",
            returncode=returncode,
            log_path=path,
        )

    errors = collect_errors(log_text)
    if not errors:
        return UnexpectedLogStateError(
            f"Executable exited with status {returncode} but no error was found in its log. "
            "Something bad happened",
            returncode=returncode,
            log_path=path,
        )

    return CompilationError(
        ERROR_SEPARATOR.join(errors),
        errors=errors,
        returncode=returncode,
        log_path=path,
    )

"""
Shared fixtures: a stand-in typesetting executable.

The fake engine reads the document from stdin and acts on directives in it:

    %rerun-until N   log asks for a rerun until the Nth pass in this working directory
    %rerun-always    log always asks for a rerun
    %log TEXT        append TEXT to the log file
    %exit N          exit with status N
    %no-pdf          do not write the PDF
    %no-log          do not write the log
    %sleep S         sleep S seconds before doing anything else

Every invocation appends a JSON record (cwd, args, TEXINPUTS, pass number)
to the file named by FAKE_ENGINE_CALLS.
"""

import json
import stat
import sys
from pathlib import Path

import pytest

FAKE_ENGINE = '''#!{python}
import json
import os
import sys
import time
from pathlib import Path

args = sys.argv[1:]
jobname = [a.split("=", 1)[1] for a in args if a.startswith("-jobname=")][0]
document = sys.stdin.buffer.read()
lines = document.decode("utf-8").splitlines()

directives = {{}}
log_lines = []
for line in lines:
    if line.startswith("%log "):
        log_lines.append(line[len("%log "):])
    elif line.startswith("%"):
        key, _, value = line[1:].partition(" ")
        directives[key] = value.strip()

if "sleep" in directives:
    time.sleep(float(directives["sleep"]))

passes_file = Path("passes.aux")
pass_number = int(passes_file.read_text()) + 1 if passes_file.exists() else 1
passes_file.write_text(str(pass_number))

with open(os.environ["FAKE_ENGINE_CALLS"], "a") as f:
    f.write(json.dumps({{
        "cwd": os.getcwd(),
        "args": args,
        "texinputs": os.environ.get("TEXINPUTS"),
        "pass": pass_number,
    }}) + "\\n")

print("This is FakeTeX, Version 3.14")
print("pass " + str(pass_number))

log = ["This is FakeTeX, Version 3.14  (preloaded format=fake)"]
if "rerun-always" in directives:
    log.append("LaTeX Warning: Label(s) may have changed. Rerun to get cross-references right.")
if "rerun-until" in directives and pass_number < int(directives["rerun-until"]):
    log.append("LaTeX Warning: Label(s) may have changed. Rerun to get cross-references right.")
log.extend(log_lines)

if "no-log" not in directives:
    Path(jobname + ".log").write_text("\\n".join(log) + "\\n", encoding="latin-1")

code = int(directives.get("exit", "0"))
if code == 0 and "no-pdf" not in directives:
    Path(jobname + ".pdf").write_bytes(b"%PDF-fake\\n" + document)

sys.exit(code)
'''


@pytest.fixture
def engine_calls(tmp_path, monkeypatch):
    """Path of the invocation record file, exported as FAKE_ENGINE_CALLS."""
    calls = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_ENGINE_CALLS", str(calls))
    monkeypatch.delenv("TEXINPUTS", raising=False)
    return calls


@pytest.fixture
def fake_engine(tmp_path, engine_calls):
    """Executable path of the fake typesetting engine."""
    engine = tmp_path / "faketex"
    engine.write_text(FAKE_ENGINE.format(python=sys.executable))
    engine.chmod(engine.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(engine)


def read_calls(calls: Path) -> list:
    """Invocation records written by the fake engine, oldest first."""
    if not calls.exists():
        return []
    return [json.loads(line) for line in calls.read_text().splitlines() if line.strip()]


@pytest.fixture
def calls_of(engine_calls):
    """Callable returning the fake engine's invocation records."""
    return lambda: read_calls(engine_calls)

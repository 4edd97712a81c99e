"""
Typesetting Process Invocation

Runs the typesetting executable once: document on stdin, working directory as cwd,
TEXINPUTS extended with the configured search paths.
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

from texrender.contexts.rendering.exceptions import LaunchError, RenderTimeoutError
from texrender.contexts.rendering.log_interpreter import log_path
from texrender.contexts.rendering.logger import _log_debug, _log_warning
from texrender.contexts.rendering.options import RenderOptions

# Seconds a timed-out child gets to exit after SIGTERM before it is killed
TERMINATE_GRACE_S = 5.0


@dataclass
class PassOutcome:
    """
    Result of one invocation of the typesetting executable.

    Attributes:
        returncode: Exit status
        stdout: Standard output (decoded, invalid bytes replaced)
        stderr: Standard error (decoded, invalid bytes replaced)
        log_path: Where the executable was expected to write its log
    """

    returncode: int
    stdout: str
    stderr: str
    log_path: Path

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def build_command(options: RenderOptions, jobname: str) -> List[str]:
    """Command line for one pass: fixed job name, stop at the first error."""
    return [options.command, "-halt-on-error", f"-jobname={jobname}"]


def build_env(options: RenderOptions) -> dict:
    """Process environment with TEXINPUTS set when search paths are configured."""
    env = dict(os.environ)
    texinputs = options.texinputs_env()
    if texinputs is not None:
        env["TEXINPUTS"] = texinputs
    return env


def run_pass(document: bytes, workdir: Path, options: RenderOptions, jobname: str) -> PassOutcome:
    """
    Spawn the executable and wait for it to finish.

    Every line written to stdout is passed to options.logger once the pass ends.

    Raises:
        LaunchError: If the executable cannot be started
        RenderTimeoutError: If the pass runs longer than options.timeout
    """
    cmd = build_command(options, jobname)
    _log_debug(f"Running: {' '.join(cmd)}")

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=workdir,
            env=build_env(options),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise LaunchError(f"Could not start {options.command!r}: {e.strerror or e}") from e

    try:
        stdout, stderr = proc.communicate(input=document, timeout=options.timeout)
    except subprocess.TimeoutExpired as e:
        _log_warning(f"Pass exceeded {options.timeout}s, terminating {options.command}")
        proc.terminate()
        try:
            proc.communicate(timeout=TERMINATE_GRACE_S)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
        raise RenderTimeoutError(
            f"{options.command} did not finish within {options.timeout}s and was terminated",
            timeout=options.timeout,
        ) from e

    stdout_text = stdout.decode("utf-8", errors="replace")
    for line in stdout_text.splitlines():
        options.logger(line)

    return PassOutcome(
        returncode=proc.returncode,
        stdout=stdout_text,
        stderr=stderr.decode("utf-8", errors="replace"),
        log_path=log_path(workdir, jobname),
    )

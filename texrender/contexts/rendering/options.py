"""
Render Options

Job configuration for a render: which executable to run, how many passes,
where auxiliary assets live, and what to do with the working directory on failure.

Defaults come from the environment (optionally via a .env file):
    TEXRENDER_COMMAND          Typesetting executable (default: pdflatex)
    TEXRENDER_TEXINPUTS        Auxiliary search paths, os.pathsep-separated
    TEXRENDER_KEEP_ON_FAILURE  1/true/yes/on to keep the working directory of failed renders

Examples:
    >>> options = RenderOptions(runs=2, texinputs=["/my/assets", "/my/other/assets"])
    >>> options = load_options(Path("render.yaml"), timeout=60)
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

from dotenv import load_dotenv
from omegaconf import OmegaConf

from texrender.contexts.rendering.exceptions import InvalidOptionsError

load_dotenv()

DEFAULT_COMMAND = os.getenv("TEXRENDER_COMMAND") or "pdflatex"
DEFAULT_TEXINPUTS = os.getenv("TEXRENDER_TEXINPUTS", "")
TRUTHY_VALUES = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable (1/true/yes/on, case-insensitive)."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUTHY_VALUES


DEFAULT_KEEP_ON_FAILURE = env_flag("TEXRENDER_KEEP_ON_FAILURE")

# Ceiling for automatic mode, where the log decides whether another pass is needed
MAX_AUTO_PASSES = 5

LogFun = Callable[[str], None]


def NOP_LOGGER(logline: str) -> None:
    """Default log-line callback: discard the line."""


@dataclass(frozen=True)
class RenderOptions:
    """
    Knobs that change how a document is rendered.

    Attributes:
        command: Executable to run. Set a full path if PATH is not defined in your environment.
        runs: Number of passes. 0 means automatic: rerun while the log asks for it,
              up to MAX_AUTO_PASSES.
        texinputs: Directories containing assets (images, style files) needed by the
                   document, as an os.pathsep-separated string or a sequence of paths.
                   Added to TEXINPUTS for the executable.
        logger: Called with every line the executable writes to stdout.
        keep_on_failure: Keep the working directory when a render fails, so the log
                         can be inspected. The error names its location.
        timeout: Seconds to wait for each pass before terminating it (None = no limit).
    """

    command: str = DEFAULT_COMMAND
    runs: int = 0
    texinputs: Union[str, Sequence[Union[str, Path]]] = DEFAULT_TEXINPUTS
    logger: LogFun = field(default=NOP_LOGGER, compare=False)
    keep_on_failure: bool = DEFAULT_KEEP_ON_FAILURE
    timeout: Optional[float] = None

    @property
    def automatic(self) -> bool:
        return self.runs == 0

    @property
    def max_passes(self) -> int:
        return self.runs if self.runs > 0 else MAX_AUTO_PASSES

    def validate(self) -> "RenderOptions":
        """
        Check option values and return a normalized copy.

        Sequence-valued texinputs are joined with os.pathsep. A None logger
        is replaced by the no-op logger.

        Raises:
            InvalidOptionsError: If any option is out of range
        """
        if not self.command or not str(self.command).strip():
            raise InvalidOptionsError("command must be a non-empty executable name or path")
        if isinstance(self.runs, bool) or not isinstance(self.runs, int):
            raise InvalidOptionsError(f"runs must be an integer, got: {self.runs!r}")
        if self.runs < 0:
            raise InvalidOptionsError(f"runs must be 0 (automatic) or positive, got: {self.runs}")
        if self.timeout is not None:
            if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
                raise InvalidOptionsError(f"timeout must be a number of seconds, got: {self.timeout!r}")
            if self.timeout <= 0:
                raise InvalidOptionsError(f"timeout must be positive, got: {self.timeout}")
        if not isinstance(self.keep_on_failure, bool):
            raise InvalidOptionsError(
                f"keep_on_failure must be true or false, got: {self.keep_on_failure!r}"
            )

        logger = NOP_LOGGER if self.logger is None else self.logger
        if not callable(logger):
            raise InvalidOptionsError(f"logger must be callable, got: {type(logger).__name__}")

        texinputs = self.texinputs or ""
        if not isinstance(texinputs, str):
            texinputs = os.pathsep.join(str(p) for p in texinputs)

        return replace(self, command=str(self.command), texinputs=texinputs, logger=logger)

    def texinputs_env(self) -> Optional[str]:
        """
        TEXINPUTS value for the executable, or None if no search paths are set.

        The trailing separator tells TeX to search its default locations as well.
        """
        texinputs = self.texinputs
        if not isinstance(texinputs, str):
            texinputs = os.pathsep.join(str(p) for p in texinputs)
        if not texinputs:
            return None
        return texinputs + os.pathsep


def load_options(config_path: Path, **overrides: Any) -> RenderOptions:
    """
    Load render options from a YAML file.

    Keys match RenderOptions fields (logger cannot be set from a file).
    Keyword overrides take precedence over the file.

    Args:
        config_path: Path to YAML config file
        **overrides: Field values applied on top of the file

    Returns:
        Validated RenderOptions

    Raises:
        InvalidOptionsError: If the file has unknown keys or invalid values

    Example:
        # render.yaml
        # command: lualatex
        # runs: 2
        # texinputs: [assets, styles]
        >>> options = load_options(Path("render.yaml"), timeout=30)
    """
    loaded = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}
    if not isinstance(loaded, dict):
        raise InvalidOptionsError(f"Config file must contain a mapping: {config_path}")

    allowed = {f.name for f in fields(RenderOptions)} - {"logger"}
    unknown = sorted(set(loaded) - allowed)
    if unknown:
        raise InvalidOptionsError(
            f"Unknown option(s) in {config_path}: {unknown}. Allowed: {sorted(allowed)}"
        )

    values = {**loaded, **{k: v for k, v in overrides.items() if v is not None}}
    return RenderOptions(**values).validate()

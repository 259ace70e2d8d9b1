"""Detection of the external PDF compression tools installed on the host.

Two tool families are supported:
    - generalized filter (qpdf): stream recompression, object streams,
      linearization; never resamples images.
    - rasterizer (Ghostscript): rewrites the document through the pdfwrite
      device, downsampling images to a target resolution.

Availability is probed on every compression request rather than cached,
since tools can be installed or removed while the service runs.
"""

import logging
import os
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from pdf_utility.compression.process import CommandRunner, run_command

logger = logging.getLogger(__name__)


class ToolFamily(str, Enum):
    """Classes of external compression engines."""

    GENERALIZED_FILTER = "generalized-filter"
    RASTERIZER = "rasterizer"


# Executable names searched on PATH, in order of preference
if os.name == "nt":
    _GHOSTSCRIPT_NAMES: tuple[str, ...] = ("gswin64c", "gswin32c", "gs")
else:
    _GHOSTSCRIPT_NAMES = ("gs",)

DEFAULT_EXECUTABLES: dict[ToolFamily, tuple[str, ...]] = {
    ToolFamily.GENERALIZED_FILTER: ("qpdf",),
    ToolFamily.RASTERIZER: _GHOSTSCRIPT_NAMES,
}


class ToolProbe(Protocol):
    """Capability detection for one tool family at a time."""

    async def probe(self, family: ToolFamily) -> bool:
        """Return True when the family's tool can be run. Never raises."""
        ...

    def executable(self, family: ToolFamily) -> str:
        """Return the program name or path used to invoke the family's tool."""
        ...


@dataclass(frozen=True)
class ToolAvailability:
    """Snapshot of which tool families were usable for one request.

    Attributes:
        executables: Resolved executable per available family.
    """

    executables: Mapping[ToolFamily, str] = field(default_factory=dict)

    def is_available(self, family: ToolFamily) -> bool:
        return family in self.executables

    def executable(self, family: ToolFamily) -> str:
        """Return the executable for an available family.

        Raises:
            KeyError: If the family was not available.
        """
        return self.executables[family]

    @property
    def any_available(self) -> bool:
        return bool(self.executables)

    def as_dict(self) -> dict[str, bool]:
        return {family.value: family in self.executables for family in ToolFamily}


class SubprocessToolProbe:
    """Probe tools by locating them on PATH and running ``<tool> --version``.

    A missing binary, a spawn error, a timeout, or a non-zero exit all count
    as "unavailable".
    """

    def __init__(
        self,
        overrides: Mapping[ToolFamily, str | None] | None = None,
        *,
        timeout: float = 10.0,
        runner: CommandRunner = run_command,
    ) -> None:
        """Initialize the probe.

        Args:
            overrides: Explicit executable per family (name or path).
            timeout: Seconds allowed for each ``--version`` call.
            runner: Command runner used for the version call.
        """
        self._overrides = {k: v for k, v in (overrides or {}).items() if v}
        self._timeout = timeout
        self._runner = runner

    def _locate(self, family: ToolFamily) -> str | None:
        override = self._overrides.get(family)
        if override:
            return shutil.which(override)

        for name in DEFAULT_EXECUTABLES[family]:
            found = shutil.which(name)
            if found:
                return found
        return None

    def executable(self, family: ToolFamily) -> str:
        return self._locate(family) or self._overrides.get(family) or DEFAULT_EXECUTABLES[family][0]

    async def probe(self, family: ToolFamily) -> bool:
        executable = self._locate(family)
        if executable is None:
            logger.debug(f"No executable found for {family.value}")
            return False

        try:
            outcome = await self._runner([executable, "--version"], timeout=self._timeout)
        except Exception as e:
            logger.debug(f"Probe for {family.value} failed to run {executable}: {e}")
            return False

        if not outcome.ok:
            logger.debug(
                f"Probe for {family.value} failed: returncode={outcome.returncode} "
                f"timed_out={outcome.timed_out}"
            )
            return False

        version = outcome.stdout.splitlines()[0] if outcome.stdout else "unknown version"
        logger.debug(f"Found {family.value} tool {executable} ({version})")
        return True


class StaticToolProbe:
    """Probe with fixed answers, for tests and for hosts with known tooling."""

    def __init__(self, available: Mapping[ToolFamily, bool]) -> None:
        self._available = dict(available)
        self.calls: list[ToolFamily] = []

    async def probe(self, family: ToolFamily) -> bool:
        self.calls.append(family)
        return self._available.get(family, False)

    def executable(self, family: ToolFamily) -> str:
        return DEFAULT_EXECUTABLES[family][0]


async def probe_tools(
    probe: ToolProbe,
    families: Iterable[ToolFamily] = tuple(ToolFamily),
) -> ToolAvailability:
    """Probe each tool family once and collect the usable ones.

    Args:
        probe: Capability detector.
        families: Families to check.

    Returns:
        ToolAvailability for this request.
    """
    executables: dict[ToolFamily, str] = {}
    for family in families:
        if await probe.probe(family):
            executables[family] = probe.executable(family)

    available = ", ".join(f.value for f in executables) or "none"
    logger.info(f"Compression tools available: {available}")
    return ToolAvailability(executables=executables)

"""Locate the driver executable that runs the test suite."""

import glob
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from cljr_test_adapter.errors import DriverNotFoundError

log = logging.getLogger(__name__)


def expand_candidate(template: str, project_dir: Path) -> str:
    """Substitute {project_dir} and expand ~ in a candidate template."""
    return os.path.expanduser(template.format(project_dir=project_dir))


def resolve_driver(project_dir: Path, candidates: Sequence[str]) -> Path:
    """Return the first existing driver among the ordered candidates.

    Candidates containing glob characters may match several package
    versions; the lexicographically-last match is taken as the newest.

    Raises:
        DriverNotFoundError: If no candidate exists

    """
    searched: list[Path] = []

    for template in candidates:
        pattern = expand_candidate(template, project_dir)
        searched.append(Path(pattern))

        if glob.has_magic(pattern):
            matches = sorted(p for p in glob.glob(pattern) if os.path.isfile(p))
            if matches:
                log.debug("Driver candidates for %s: %s", pattern, matches)
                return Path(matches[-1])
        elif os.path.isfile(pattern):
            return Path(pattern)

    raise DriverNotFoundError(searched)

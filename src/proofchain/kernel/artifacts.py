"""Artifact file matching and descriptor construction."""

import glob
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from proofchain.contracts import ArtifactDescriptor
from proofchain.kernel.hash_utils import hash_file, hash_string

logger = logging.getLogger(__name__)


def _split_patterns(pattern: str):
    """Split a multi-line pattern into (includes, excludes)."""
    includes: List[str] = []
    excludes: List[str] = []
    for line in pattern.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            negated = line[1:].strip()
            if negated:
                excludes.append(negated)
        else:
            includes.append(line)
    return includes, excludes


def _expand(patterns: Iterable[str], root: Path) -> List[str]:
    """Expand glob patterns to files, descending into matched directories.

    Hidden files match wildcards, as they do inside matched directories.
    """
    found: List[str] = []
    for pat in patterns:
        full = pat if os.path.isabs(pat) else os.path.join(glob.escape(str(root)), pat)
        for match in glob.glob(full, recursive=True, include_hidden=True):
            if os.path.isdir(match):
                for dirpath, _dirnames, filenames in os.walk(match):
                    for filename in filenames:
                        found.append(os.path.abspath(os.path.join(dirpath, filename)))
            elif os.path.isfile(match):
                found.append(os.path.abspath(match))
    return found


def match_files(pattern: str, root: Optional[Union[str, Path]] = None) -> List[str]:
    """Return the files matching a glob pattern, in match order.

    The pattern may hold several newline-separated globs. Blank lines and
    lines starting with ``#`` are ignored; lines starting with ``!`` exclude
    whatever they match. ``**`` matches across directories, and a pattern
    that matches a directory includes every file below it. Relative patterns
    are resolved against ``root`` (default: the working directory).

    Returns:
        Absolute paths of regular files, without duplicates
    """
    base = Path(root) if root is not None else Path.cwd()
    includes, excludes = _split_patterns(pattern)
    excluded = set(_expand(excludes, base))

    seen = set()
    files: List[str] = []
    for path in _expand(includes, base):
        if path in excluded or path in seen:
            continue
        seen.add(path)
        files.append(path)
    logger.debug("Pattern %r matched %d file(s) under %s", pattern, len(files), base)
    return files


def describe_file(path: Union[str, Path]) -> ArtifactDescriptor:
    """Read size and content fingerprint of one file."""
    p = Path(path)
    size = os.stat(p).st_size
    digest = hash_file(p)
    return ArtifactDescriptor(name=p.name, path=str(p), size=size, hash=digest)


def combine_hashes(hashes: Iterable[str]) -> str:
    """Fingerprint of the sorted, concatenated file fingerprints.

    Sorting makes the result independent of discovery order.
    """
    return hash_string("".join(sorted(hashes)))

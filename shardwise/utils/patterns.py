"""
Spec file pattern resolution.

Turns the glob patterns of a suite file into concrete, absolute spec paths.
Patterns are resolved relative to a base directory (normally the directory
holding the suite file) and support recursive ``**`` matching.
"""

import glob
from pathlib import Path
from typing import Iterable, List, Optional, Union

from shardwise.utils.logging import get_logger

log = get_logger("patterns")

def unique(paths: Iterable[str]) -> List[str]:
    """
    Drop duplicate paths, keeping the first occurrence of each.

    :param paths: Paths in priority order.
    :return: Order-preserving list without duplicates.
    """
    seen = set()
    result = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result

def resolve_file_patterns(patterns: Optional[Union[str, List[str]]],
                          is_exclusion: bool = False,
                          base_dir: Optional[Path] = None
                          ) -> List[str]:
    """
    Resolve glob patterns into a deduplicated list of absolute file paths.

    Matches of a single pattern are sorted so the result is deterministic for
    a given filesystem state; patterns themselves keep their configured order.
    A pattern that matches nothing is reported, except when resolving an
    exclusion list where missing files are expected.

    :param patterns: A pattern or list of patterns. None yields an empty list.
    :param is_exclusion: True when resolving exclusions (suppresses warnings).
    :param base_dir: Directory patterns are relative to (default: cwd).
    :return: Absolute paths in pattern order, without duplicates.
    """
    if not patterns:
        return []
    if isinstance(patterns, str):
        patterns = [patterns]

    base = Path(base_dir) if base_dir else Path.cwd()
    resolved = []
    for pattern in patterns:
        full_pattern = str(base / Path(pattern).expanduser())
        matches = [m for m in sorted(glob.glob(full_pattern, recursive=True)) if Path(m).is_file()]
        if not matches and not is_exclusion:
            log.warning(f"Pattern {pattern} did not match any files.")
        resolved.extend(str(Path(match).resolve()) for match in matches)

    return unique(resolved)

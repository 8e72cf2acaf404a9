"""Consistency of a declared domicile division.

``division_path_violations`` checks a caller's declared path on its own.
``check_division_level`` asks the external hierarchy and is used by the
differ, where a mismatch is a terminal failure.
"""

from typing import List, Optional

from ..errors import DivisionLevelMismatchError, ErrorKind, FieldError, field_error, join_path
from ..schemas.divisions import DivisionDirectory, DivisionPath


def division_path_violations(
    division_id: Optional[str],
    path: Optional[DivisionPath],
    level: Optional[int],
    prefix: str = "",
) -> List[FieldError]:
    """Levels are contiguous from 1, the deepest matches ``level`` and ``division_id``."""
    if path is None:
        return []
    path_key = join_path(prefix, "domicileDivisionPath")
    levels = path.levels()
    deepest = path.deepest_level
    if deepest is None:
        return [
            field_error(ErrorKind.DIVISION_LEVEL_MISMATCH, path_key, "division path names no division")
        ]

    errors = [
        field_error(
            ErrorKind.DIVISION_LEVEL_MISMATCH,
            join_path(path_key, f"level{missing}"),
            f"level {missing} is missing above level {deepest}",
        )
        for missing in range(1, deepest)
        if levels[missing] is None
    ]
    if level is not None and level != deepest:
        errors.append(
            field_error(
                ErrorKind.DIVISION_LEVEL_MISMATCH,
                join_path(prefix, "administrativeDivisionLevel"),
                f"declared level {level} but the path ends at level {deepest}",
                declared=level,
                resolved=deepest,
            )
        )
    leaf = levels[deepest]
    if division_id is not None and leaf.id != division_id:
        errors.append(
            field_error(
                ErrorKind.DIVISION_LEVEL_MISMATCH,
                join_path(path_key, f"level{deepest}", "id"),
                f"path ends at {leaf.id}, not at the domicile division {division_id}",
            )
        )
    return errors


def check_division_level(directory: DivisionDirectory, division_id: str, level: Optional[int]) -> None:
    """Confirm against the hierarchy that ``division_id`` sits at ``level``.

    Raises:
        DivisionLevelMismatchError: unknown division, or a different level
    """
    resolved = directory.level_of(division_id)
    if resolved is None:
        raise DivisionLevelMismatchError(
            f"Division {division_id} is unknown",
            path="domicileDivisionId",
            details={"division_id": division_id},
        )
    if level is not None and resolved != level:
        raise DivisionLevelMismatchError(
            f"Division {division_id} is a level {resolved} division, not level {level}",
            path="administrativeDivisionLevel",
            details={"division_id": division_id, "declared": level, "resolved": resolved},
        )

"""Administrative divisions used to locate a company's domicile.

The division hierarchy itself lives outside the engine. Callers hand the
differ a ``DivisionDirectory``; ``InMemoryDivisionDirectory`` covers tests
and small fixed datasets.
"""

from typing import Dict, Iterable, Optional, Protocol

from pydantic import Field, field_validator

from .base import DomainModel
from ..constants import DIVISION_LEVELS


def _check_level(v: int) -> int:
    if v not in DIVISION_LEVELS:
        raise ValueError(f"division level must be one of {DIVISION_LEVELS}, got {v}")
    return v


class DivisionRef(DomainModel):
    """One level of a division path as sent by the caller."""

    id: str = Field(min_length=1)
    name: Optional[str] = None


class DivisionPath(DomainModel):
    """Declared path from the top-level division down to the domicile."""

    level1: Optional[DivisionRef] = None
    level2: Optional[DivisionRef] = None
    level3: Optional[DivisionRef] = None

    def levels(self) -> Dict[int, Optional[DivisionRef]]:
        return {1: self.level1, 2: self.level2, 3: self.level3}

    @property
    def deepest_level(self) -> Optional[int]:
        populated = [level for level, node in self.levels().items() if node is not None]
        return max(populated) if populated else None

    @property
    def leaf(self) -> Optional[DivisionRef]:
        level = self.deepest_level
        return self.levels()[level] if level else None


class DivisionNode(DomainModel):
    """A node of the external division hierarchy."""

    id: str
    name: str = ""
    level: int = Field(description="1, 2 or 3")
    parent_id: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: int) -> int:
        return _check_level(v)


class DivisionDirectory(Protocol):
    """Lookup interface onto the external division hierarchy."""

    def level_of(self, division_id: str) -> Optional[int]:
        """Level of the division, or None when the id is unknown."""
        ...

    def path_of(self, division_id: str) -> Optional[DivisionPath]:
        """Path from level 1 down to the division, or None when unknown."""
        ...


class InMemoryDivisionDirectory:
    """``DivisionDirectory`` over a flat list of nodes."""

    def __init__(self, nodes: Iterable[DivisionNode]):
        self._nodes: Dict[str, DivisionNode] = {node.id: node for node in nodes}

    def level_of(self, division_id: str) -> Optional[int]:
        node = self._nodes.get(division_id)
        return node.level if node else None

    def path_of(self, division_id: str) -> Optional[DivisionPath]:
        node = self._nodes.get(division_id)
        if node is None:
            return None
        levels: Dict[str, DivisionRef] = {}
        while node is not None:
            key = f"level{node.level}"
            if key in levels:
                break
            levels[key] = DivisionRef(id=node.id, name=node.name)
            node = self._nodes.get(node.parent_id) if node.parent_id else None
        return DivisionPath(**levels)

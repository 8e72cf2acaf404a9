"""Base classes for review computation blocks.

Blocks turn validated governance data into pandas DataFrames for review:
- Block declares the context keys it reads and writes
- BlockContext carries values between blocks
- BlockExecutor runs blocks in dependency order (Kahn's algorithm)
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Block Context
# =============================================================================

@dataclass
class BlockContext:
    """Named values shared between blocks.

    Example:
        context = BlockContext({"shareholders": shareholders, "voting_rights_mode": "CUSTOM"})
        ShareholderRegisterBlock().execute(context)
        register_df = context.get("shareholder_register")
    """

    _data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        """Value stored under ``key``.

        Raises:
            KeyError: If key not found in context
        """
        if key not in self._data:
            raise KeyError(f"Key '{key}' not found in context. Available keys: {self.keys()}")
        return self._data[key]

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data.keys())


# =============================================================================
# Block Base Class
# =============================================================================

class Block(ABC):
    """A computation unit with declared inputs and outputs.

    Subclass example:
        class RosterBlock(Block):
            def inputs(self) -> List[str]:
                return ["roster"]

            def outputs(self) -> List[str]:
                return ["officer_table"]

            def execute(self, context: BlockContext) -> None:
                context.set("officer_table", build_table(context.get("roster")))
    """

    @abstractmethod
    def inputs(self) -> List[str]:
        """Context keys this block reads."""

    @abstractmethod
    def outputs(self) -> List[str]:
        """Context keys this block writes."""

    @abstractmethod
    def execute(self, context: BlockContext) -> None:
        """Read inputs from ``context`` and write every declared output."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(inputs={self.inputs()}, outputs={self.outputs()})"


# =============================================================================
# Dependency Resolution
# =============================================================================

class CircularDependencyError(Exception):
    """Raised when blocks depend on each other in a cycle."""


def topological_sort(blocks: List[Block]) -> List[Block]:
    """Order blocks so each runs after the blocks producing its inputs.

    Inputs no block produces must be in the initial context. Ties keep the
    order in which blocks were given.

    Raises:
        ValueError: If two blocks declare the same output
        CircularDependencyError: If blocks depend on each other in a cycle
    """
    producers: Dict[str, Block] = {}
    for block in blocks:
        for key in block.outputs():
            if key in producers:
                raise ValueError(f"Multiple blocks produce '{key}': {producers[key]} and {block}")
            producers[key] = block

    in_degree: Dict[Block, int] = {block: 0 for block in blocks}
    dependents: Dict[Block, List[Block]] = {block: [] for block in blocks}
    for block in blocks:
        for key in block.inputs():
            producer = producers.get(key)
            if producer is not None:
                dependents[producer].append(block)
                in_degree[block] += 1

    ready: Deque[Block] = deque(block for block in blocks if in_degree[block] == 0)
    ordered: List[Block] = []
    while ready:
        current = ready.popleft()
        ordered.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)

    if len(ordered) != len(blocks):
        remaining = [block for block in blocks if in_degree[block] > 0]
        raise CircularDependencyError(f"Circular dependency detected among blocks: {remaining}")
    return ordered


# =============================================================================
# Block Executor
# =============================================================================

class BlockExecutor:
    """Runs blocks in dependency order over one context.

    Example:
        executor = BlockExecutor([ChangeSetBlock(), ShareholderRegisterBlock(), RosterBlock()])
        context = executor.execute(BlockContext({
            "shareholders": state.shareholders,
            "voting_rights_mode": state.voting_rights_mode,
            "roster": state.roster,
            "change_set": change_set,
        }))
    """

    def __init__(self, blocks: List[Block]):
        self.blocks = blocks
        self._order: Optional[List[Block]] = None

    def execute(self, context: BlockContext) -> BlockContext:
        """Run every block and return the context holding all outputs.

        Raises:
            CircularDependencyError: If blocks have circular dependencies
            KeyError: If an input is neither produced nor in the context
            ValueError: If a block does not write a declared output
        """
        if self._order is None:
            self._order = topological_sort(self.blocks)

        for block in self._order:
            missing = [key for key in block.inputs() if not context.has(key)]
            if missing:
                raise KeyError(
                    f"Block {block} requires inputs {missing} not in context. Available keys: {context.keys()}"
                )
            logger.debug("Executing %r", block)
            block.execute(context)
            unwritten = [key for key in block.outputs() if not context.has(key)]
            if unwritten:
                raise ValueError(f"Block {block} declared outputs {unwritten} but didn't write them")
        return context

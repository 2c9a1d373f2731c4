"""Ordered transform chains and attribute mappings."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from .context import ExecutionContext
from .exceptions import ChainStepError, ConfigError, TransformError
from .transforms import Transform, build_transform


@dataclass(frozen=True)
class TransformChain:
    """Immutable sequence of transforms applied left to right.

    Usage:
        chain = build_chain([{"type": "ToUpper"}, {"type": "Trim"}])
        chain.apply(" alice ")  # "ALICE"
    """
    steps: Tuple[Transform, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    def __iter__(self) -> Iterator[Transform]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def apply(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        """Feed value through every step in order.

        Raises:
            ChainStepError: First failing step; later steps are not run
        """
        context = context or ExecutionContext()
        for position, step in enumerate(self.steps):
            before = value
            try:
                value = step.convert(value, context)
            except TransformError as exc:
                error = ChainStepError(position, step.name, step.parameters(), exc)
                context.trace("step-failed", position, step.name, repr(before), str(exc))
                raise error from exc
            context.trace("step", position, step.name, repr(before), repr(value))
        return value


@dataclass(frozen=True)
class AttributeMapping:
    """Flow of one source attribute into one target attribute through a chain."""
    name: str
    source: str
    target: str
    chain: TransformChain


def build_chain(descriptors: Iterable[Mapping[str, Any]]) -> TransformChain:
    """Validate every descriptor and return the resulting chain.

    Raises:
        ConfigError: On the first invalid descriptor (message carries its position)
    """
    if isinstance(descriptors, (str, bytes, Mapping)):
        raise ConfigError("Transform chain must be a list of transform descriptors")
    steps = []
    for position, descriptor in enumerate(descriptors or ()):
        try:
            steps.append(build_transform(descriptor))
        except ConfigError as exc:
            raise ConfigError(f"transform {position}: {exc}") from exc
    return TransformChain(tuple(steps))

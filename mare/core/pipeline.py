"""Pipeline entry point used by the hosting sync engine.

Architecture:
    host ──> PipelineInvoker.run(chain, raw_value)
                 │  new ExecutionContext (lookup, diagnostics)
                 └──> TransformChain.apply ──> transforms, one by one
             <── PipelineResult(value | error)

One pass per invocation: no retries, no partial output. Configuration errors
are raised while building the chain, before any step runs; transform failures
come back as ``PipelineResult.error``.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from .chain import AttributeMapping, TransformChain, build_chain
from .context import Diagnostics, ExecutionContext, ExternalLookup
from .exceptions import ChainStepError, ConfigError

logger = logging.getLogger(__name__)

ChainLike = Union[TransformChain, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline invocation."""
    value: Any = None
    error: Optional[ChainStepError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"ok": False, **self.error.to_dict()}
        return {"ok": True, "value": self.value}


class PipelineInvoker:
    """Evaluates transform chains for the host.

    The invoker holds only the host collaborators; it can be shared by
    concurrent invocations.

    Usage:
        invoker = PipelineInvoker(lookup=metaverse, diagnostics=LoggingDiagnostics())
        result = invoker.run(chain, " alice ")
        if result.ok:
            target["displayName"] = result.value
    """

    def __init__(
        self,
        lookup: Optional[ExternalLookup] = None,
        diagnostics: Optional[Diagnostics] = None,
        lookup_max_results: int = 1,
    ):
        if lookup_max_results < 1:
            raise ConfigError("lookup_max_results must be at least 1")
        self.lookup = lookup
        self.diagnostics = diagnostics
        self.lookup_max_results = lookup_max_results

    def new_context(self) -> ExecutionContext:
        return ExecutionContext(
            lookup=self.lookup,
            diagnostics=self.diagnostics,
            lookup_max_results=self.lookup_max_results,
        )

    def run(self, chain: ChainLike, raw_value: Any) -> PipelineResult:
        """Evaluate a chain against one value.

        Args:
            chain: Configured chain, or a list of transform descriptors
            raw_value: Attribute value as provided by the host

        Returns:
            PipelineResult with the final value or the failing step

        Raises:
            ConfigError: If chain is a descriptor list that does not validate
        """
        if not isinstance(chain, TransformChain):
            chain = build_chain(chain)

        context = self.new_context()
        try:
            value = chain.apply(raw_value, context)
        except ChainStepError as exc:
            logger.debug("Transform chain failed: %s", exc)
            return PipelineResult(error=exc)
        return PipelineResult(value=value)

    def run_mapping(self, mapping: AttributeMapping, source_values: Mapping[str, Any]) -> PipelineResult:
        """Evaluate a mapping against the source attributes of one entry.

        A source attribute missing from source_values is treated as absent.
        """
        return self.run(mapping.chain, source_values.get(mapping.source))

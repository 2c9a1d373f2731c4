"""Rule file loader: YAML documents into validated chains and mappings.

Document layout:

    chains:
      upper-trim:
        - type: ToUpper
        - type: Trim
    mappings:
      - name: displayName
        source: givenName
        target: displayName
        chain: upper-trim            # reference a named chain ...
      - name: employeeNumber
        source: employeeID
        target: employeeNumber
        transforms:                  # ... or declare the steps inline
          - type: PadLeft
            TotalWidth: 8
            PaddingChar: "0"

Every descriptor is validated while loading; nothing is deferred to first use.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

from mare.core.chain import AttributeMapping, TransformChain, build_chain
from mare.core.exceptions import ConfigError


@dataclass(frozen=True)
class PipelineConfig:
    """Named chains and attribute mappings loaded from a rule file."""
    chains: Dict[str, TransformChain] = field(default_factory=dict)
    mappings: Tuple[AttributeMapping, ...] = ()

    def get_chain(self, name: str) -> TransformChain:
        try:
            return self.chains[name]
        except KeyError:
            raise ConfigError(f"Unknown chain: {name!r}") from None

    def get_mapping(self, name: str) -> AttributeMapping:
        for mapping in self.mappings:
            if mapping.name == name:
                return mapping
        raise ConfigError(f"Unknown mapping: {name!r}")


def _parse_mapping(index: int, raw: Any, chains: Mapping[str, TransformChain]) -> AttributeMapping:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"mappings[{index}] must be a mapping")

    name = raw.get("name") or raw.get("target")
    source = raw.get("source")
    target = raw.get("target")
    if not source or not target:
        raise ConfigError(f"mappings[{index}] requires 'source' and 'target'")

    has_ref = "chain" in raw
    has_inline = "transforms" in raw
    if has_ref and has_inline:
        raise ConfigError(f"mappings[{index}] ({name}): use either 'chain' or 'transforms', not both")
    if has_ref:
        chain_name = raw["chain"]
        if not isinstance(chain_name, str) or chain_name not in chains:
            raise ConfigError(f"mappings[{index}] ({name}): unknown chain {chain_name!r}")
        chain = chains[chain_name]
    else:
        try:
            chain = build_chain(raw.get("transforms") or [])
        except ConfigError as exc:
            raise ConfigError(f"mappings[{index}] ({name}): {exc}") from exc

    return AttributeMapping(name=str(name), source=str(source), target=str(target), chain=chain)


def parse_config(document: Any) -> PipelineConfig:
    """Validate an already-parsed rule document.

    Raises:
        ConfigError: On any structural or descriptor error
    """
    if document is None:
        return PipelineConfig()
    if not isinstance(document, Mapping):
        raise ConfigError("Rule document must be a mapping with 'chains' and/or 'mappings'")

    raw_chains = document.get("chains") or {}
    if not isinstance(raw_chains, Mapping):
        raise ConfigError("'chains' must map chain names to transform lists")
    chains: Dict[str, TransformChain] = {}
    for chain_name, descriptors in raw_chains.items():
        try:
            chains[str(chain_name)] = build_chain(descriptors or [])
        except ConfigError as exc:
            raise ConfigError(f"chains.{chain_name}: {exc}") from exc

    raw_mappings = document.get("mappings") or []
    if not isinstance(raw_mappings, list):
        raise ConfigError("'mappings' must be a list")
    mappings = tuple(_parse_mapping(index, raw, chains) for index, raw in enumerate(raw_mappings))

    names = [mapping.name for mapping in mappings]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate mapping name(s): {', '.join(duplicates)}")

    return PipelineConfig(chains=chains, mappings=mappings)


def load_config(path: Path) -> PipelineConfig:
    """Load and validate a YAML rule file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rule file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            document = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return parse_config(document)

"""Tests for YAML rule file loading."""

import textwrap

import pytest

from mare.config import load_config, parse_config
from mare.core.exceptions import ConfigError

RULES = textwrap.dedent(
    """
    chains:
      upper-trim:
        - type: ToUpper
        - type: Trim
      groups:
        - type: MultiValueRemoveIfNotMatch
          Pattern: "^temp"
        - type: MultiValueConcatenate
          Separator: ";"
    mappings:
      - name: displayName
        source: givenName
        target: displayName
        chain: upper-trim
      - source: employeeID
        target: employeeNumber
        transforms:
          - type: PadLeft
            TotalWidth: 8
            PaddingChar: "0"
      - source: cn
        target: description
    """
)


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "mare.yaml"
    path.write_text(RULES)
    return path


def test_load_config(rules_file):
    config = load_config(rules_file)

    assert sorted(config.chains) == ["groups", "upper-trim"]
    assert [m.name for m in config.mappings] == ["displayName", "employeeNumber", "description"]
    assert config.get_mapping("displayName").chain is config.get_chain("upper-trim")
    assert config.get_mapping("employeeNumber").chain.apply("42") == "00000042"
    assert config.get_chain("groups").apply(["temp1", "a", "b"]) == "a;b"


def test_mapping_without_transforms_copies_value(rules_file):
    mapping = load_config(rules_file).get_mapping("description")
    assert len(mapping.chain) == 0
    assert mapping.chain.apply("Finance") == "Finance"


def test_unknown_names(rules_file):
    config = load_config(rules_file)
    with pytest.raises(ConfigError):
        config.get_chain("missing")
    with pytest.raises(ConfigError):
        config.get_mapping("missing")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("chains: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_empty_document():
    config = parse_config(None)
    assert config.chains == {}
    assert config.mappings == ()


def test_bad_descriptor_reports_location():
    document = {"chains": {"ids": [{"type": "Trim"}, {"type": "SetBit"}]}}
    with pytest.raises(ConfigError, match=r"chains\.ids: transform 1"):
        parse_config(document)


@pytest.mark.parametrize(
    "document",
    [
        ["not", "a", "mapping"],
        {"chains": ["ToUpper"]},
        {"mappings": {"source": "a"}},
        {"mappings": ["source"]},
        {"mappings": [{"source": "a"}]},
        {"mappings": [{"source": "a", "target": "b", "chain": "missing"}]},
        {"mappings": [{"source": "a", "target": "b", "chain": ["ToUpper"]}]},
        {
            "chains": {"c": []},
            "mappings": [{"source": "a", "target": "b", "chain": "c", "transforms": []}],
        },
        {"mappings": [{"source": "a", "target": "b", "transforms": [{"type": "Nope"}]}]},
        {"mappings": [{"source": "a", "target": "b"}, {"source": "c", "target": "b"}]},
    ],
)
def test_invalid_documents(document):
    with pytest.raises(ConfigError):
        parse_config(document)

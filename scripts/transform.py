"""Command-line helper for checking rule files and trying transform chains.

This module serves as a CLI wrapper around mare.core and mare.config.

Examples:
    python scripts/transform.py list
    python scripts/transform.py check --config mare.yaml
    python scripts/transform.py run --config mare.yaml --mapping displayName --value " alice "
    python scripts/transform.py run --config mare.yaml --chain groups --value admin1 --value user1
"""
from __future__ import annotations
import argparse
import dataclasses
import json
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mare.config import load_config
from mare.config.settings import configure_logging, settings
from mare.core.exceptions import ConfigError
from mare.core.pipeline import PipelineInvoker
from mare.core.transforms import TRANSFORMS

EXIT_FAILED = 1
EXIT_CONFIG = 2


def _describe_parameter(field) -> str:
    kind = field.metadata["kind"]
    kind_name = getattr(kind, "__name__", str(kind))
    if hasattr(kind, "__members__"):
        kind_name = "|".join(member.value for member in kind)
    required = field.default is dataclasses.MISSING
    return f"{field.metadata['param']}:{kind_name}{'' if required else '?'}"


def cmd_list() -> int:
    for name, cls in TRANSFORMS.items():
        params = [_describe_parameter(f) for f in cls.parameter_fields().values()]
        print(f"{name:<28} {' '.join(params)}")
    return 0


def cmd_check(config_path: Path) -> int:
    config = load_config(config_path)
    print(f"OK: {len(config.chains)} chain(s), {len(config.mappings)} mapping(s)")
    for mapping in config.mappings:
        steps = " -> ".join(step.describe() for step in mapping.chain) or "(copy)"
        print(f"  {mapping.source} => {mapping.target}: {steps}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if args.mapping:
        chain = config.get_mapping(args.mapping).chain
    else:
        chain = config.get_chain(args.chain)

    if args.absent:
        value = None
    elif args.value and len(args.value) == 1 and not args.multi:
        value = args.value[0]
    else:
        value = list(args.value or [])

    invoker = PipelineInvoker(
        diagnostics=settings.build_diagnostics(),
        lookup_max_results=settings.lookup_max_results,
    )
    result = invoker.run(chain, value)
    print(json.dumps(result.to_dict(), default=str, ensure_ascii=False))
    return 0 if result.ok else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="MARE transform helper")
    parser.add_argument("--log-level", default=settings.log_level)

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("list", help="List catalog variants and their parameters")

    sc = sub.add_parser("check", help="Validate a rule file")
    sc.add_argument("--config", type=Path, default=settings.config_path)

    sr = sub.add_parser("run", help="Run a chain or mapping against a value")
    sr.add_argument("--config", type=Path, default=settings.config_path)
    target = sr.add_mutually_exclusive_group(required=True)
    target.add_argument("--mapping")
    target.add_argument("--chain")
    sr.add_argument("--value", action="append", help="Input value (repeat for multi-valued input)")
    sr.add_argument("--multi", action="store_true", help="Treat a single --value as multi-valued")
    sr.add_argument("--absent", action="store_true", help="Run with an absent input value")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.cmd:
        parser.print_help()
        return 0

    try:
        if args.cmd == "list":
            return cmd_list()
        if args.cmd == "check":
            return cmd_check(args.config)
        return cmd_run(args)
    except (ConfigError, FileNotFoundError) as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return EXIT_CONFIG


if __name__ == "__main__":
    sys.exit(main())

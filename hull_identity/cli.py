from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import Settings, find_config
from .core.canon.keys import build_hull_key
from .core.canon.models import ManufacturerRef, RawRecord
from .core.canon.plan import build_dedup_plan
from .core.canon.remap import cascade_remap
from .core.canon.resolver import IdentityResolver
from .records import iter_paths, load_dependents, load_manufacturers, load_raw_records
from .serialization import cascade_to_dict, plan_to_dict, result_to_dict

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

logger = logging.getLogger(__name__)


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str, color: bool = True) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler(sys.stderr)
    formatter = ColorFormatter(LOG_FORMAT) if color else logging.Formatter(LOG_FORMAT)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Canonical hull/variant identity resolution")
    parser.add_argument("--config", type=Path, help="Path to hull-identity.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument("--no-color", action="store_true", help="Disable colored log output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_inputs(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("records", type=Path, help="JSON array of raw hull/variant rows")
        sub.add_argument(
            "--manufacturers",
            type=Path,
            help="JSON array of manufacturer rows used to resolve numeric manufacturer ids",
        )
        sub.add_argument(
            "--dependents",
            action="append",
            default=[],
            metavar="[COLLECTION=]PATH",
            help="Dependent rows to remap (ship_stats, hardpoints, installed_items); repeatable",
        )
        sub.add_argument("--out", type=Path, help="Write JSON here instead of stdout")

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve canonical hulls/variants and remap dependent rows"
    )
    add_inputs(resolve_parser)

    dedup_parser = subparsers.add_parser(
        "dedup", help="Build a dry-run deduplication plan for rows already in the store"
    )
    add_inputs(dedup_parser)

    explain_parser = subparsers.add_parser(
        "explain", help="Show how a single designation is canonicalized"
    )
    explain_parser.add_argument("designation", help="Raw name, class name or external id")
    explain_parser.add_argument("--manufacturer", required=True, help="Manufacturer code")
    explain_parser.add_argument("--manufacturer-name", default=None)
    explain_parser.add_argument("--variant-code", default=None)
    return parser


def _emit(payload: Any, out: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=False, ensure_ascii=False)
    if out is None:
        print(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", out)


def _load_settings(config: Optional[Path]) -> Settings:
    config_path = find_config(config)
    if config_path is None:
        return Settings()
    logger.debug("Using config %s", config_path)
    return Settings.load(config_path)


def _resolver(settings: Settings, manufacturers_path: Optional[Path]) -> IdentityResolver:
    resolver = settings.build_resolver()
    if manufacturers_path is not None:
        directory = load_manufacturers(manufacturers_path)
        # Configured entries win over the dump.
        directory.update(resolver.manufacturers)
        resolver.manufacturers = directory
    return resolver


def run_resolve(args: argparse.Namespace, settings: Settings, plan_only: bool) -> None:
    resolver = _resolver(settings, args.manufacturers)
    result = resolver.resolve(load_raw_records(args.records))
    dependents = []
    for collection, path in iter_paths(args.dependents):
        dependents.extend(load_dependents(path, collection))
    cascade = cascade_remap(result, dependents) if dependents else None

    if plan_only:
        plan = build_dedup_plan(result, cascade)
        for entry in plan.merge_log:
            logger.info("Merged %s into %s (keeper %s)", ", ".join(entry.merged), entry.canonical, entry.keeper)
        logger.info("Dry-run plan: %s", plan.summary())
        _emit(plan_to_dict(plan), args.out)
        return

    payload = result_to_dict(result)
    if cascade is not None:
        payload["dependents"] = cascade_to_dict(cascade)
        payload["issues"].extend(
            {"kind": issue.kind.value, "id": issue.identifier, "message": issue.message}
            for issue in cascade.issues
        )
    _emit(payload, args.out)


def run_explain(args: argparse.Namespace, settings: Settings) -> None:
    resolver = settings.build_resolver()
    record = RawRecord(
        id="explain",
        name=args.designation,
        variant_code=args.variant_code,
        manufacturer=ManufacturerRef(code=args.manufacturer, name=args.manufacturer_name),
    )
    member = resolver.canonicalize(record)
    if member is None:
        raise SystemExit("Manufacturer could not be resolved")
    variant_id = resolver.canonical_variant_id(record)
    _emit(
        {
            "designation": args.designation,
            "manufacturer_code": member.manufacturer_code,
            "family": member.family_name,
            "hull_key": build_hull_key(member.manufacturer_code, member.family_name),
            "variant_code": member.variant_code,
            "verified": resolver.matcher.is_verified(member.variant_code),
            "variant_id": variant_id,
            "edition_code": member.edition.edition_code,
            "livery": member.edition.livery,
            "edition_only": member.edition_only,
            "vocabulary_version": resolver.vocabulary.version,
        },
        None,
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level, color=not args.no_color)

    try:
        settings = _load_settings(args.config)
        match args.command:
            case "resolve":
                run_resolve(args, settings, plan_only=False)
            case "dedup":
                run_resolve(args, settings, plan_only=True)
            case "explain":
                run_explain(args, settings)
            case _:
                parser.error("Unknown command")
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m", file=sys.stderr)
            for line in warn_buffer.records:
                print(f" - {line}", file=sys.stderr)


if __name__ == "__main__":
    main()

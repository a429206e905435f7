import argparse
import logging
import os
import signal
import sys
import threading
from dataclasses import replace

from tqdm import tqdm

from .config import HarvestConfig, load_config, parse_codes
from .download import download_dump
from .errors import QueryError, StartupError
from .index import GeoIndex
from .pipeline import IngestionPipeline
from .service import FACET_FIELDS, SearchService, search_expression

logger = logging.getLogger(__name__)


def resolve_path(base_dir: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)


def _index_dir(args, cfg, base_dir: str) -> str:
    return resolve_path(base_dir, args.index_dir or cfg["index_dir"])


def cmd_harvest(args, cfg, base_dir: str) -> int:
    if not os.path.isfile(args.input):
        raise StartupError(f"The input file does not exist: {args.input}")

    config = HarvestConfig.from_settings(
        cfg,
        with_alternate_names=args.with_alternate_names,
        country_boosts=args.country_boosts,
        index_dir=_index_dir(args, cfg, base_dir),
    )
    if args.batch_size:
        config = replace(config, batch_size=args.batch_size)

    index = GeoIndex.open(config.index_dir, create=True, limitmb=config.writer_limitmb)
    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            lines = tqdm(f, unit=" rows", disable=not args.progress)
            pipeline = IngestionPipeline(lines, index, config)
            report = pipeline.run(verbose=args.verbose, cancel=cancel)
    finally:
        signal.signal(signal.SIGINT, previous)
        index.close()

    print(
        f"Read {report.rows} rows, indexed {report.indexed}, failed {report.failed} "
        f"({report.rate:.1f} rows/s) into {config.index_dir}"
    )
    if report.truncated:
        print(f"Input truncated after {config.max_batches} batches")
    if not report.clean:
        print(f"{report.commit_failures} commit(s) failed, optimize failed: {report.optimize_failed}")
        return 1
    return 0


def cmd_search(args, cfg, base_dir: str) -> int:
    index = GeoIndex.open(_index_dir(args, cfg, base_dir))
    service = SearchService(index, default_rows=cfg.get("rows", 20))
    query = search_expression(args.query, args.field)
    rows = args.rows or service.default_rows
    try:
        result = service.run_query(query, args.start, rows, args.fq, FACET_FIELDS if args.debug else None)
    except QueryError as exc:
        print(f"Search failed: {exc}")
        return 1
    finally:
        index.close()

    if args.debug:
        print(f"Query: {query}")
    print(f"\n{result.total} results:\n")
    for rank, hit in enumerate(result.hits, start=args.start + 1):
        print(f"{rank:02d}. {hit.get('id')} | score={hit.get('score', 0.0):.4f}")
        print(
            f"    {hit.get('utf8_name', '')} [{hit.get('country_code', '')}]"
            f" {hit.get('feature_class', '')}.{hit.get('feature_code', '')}"
            f" ({hit.get('latitude', '')}, {hit.get('longitude', '')})\n"
        )
    for name, counts in result.facets.items():
        print(f"{name}: " + ", ".join(f"{value}={count}" for value, count in counts))
    return 0


def cmd_download(args, cfg, base_dir: str) -> int:
    out_dir = resolve_path(base_dir, args.out_dir or cfg["download_dir"])
    path = download_dump(args.name, out_dir, keep_zip=args.keep_zip)
    print(f"Wrote {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GeoNames place search")
    parser.add_argument("--config", default="config.json")
    parser.add_argument("--index-dir", help="Whoosh index directory")
    parser.add_argument("--log-level", default="INFO")

    sub = parser.add_subparsers(dest="command", required=True)

    p_harvest = sub.add_parser("harvest", help="Index a tab-delimited GeoNames dump")
    p_harvest.add_argument("input", help="GeoNames dump, e.g. allCountries.txt")
    p_harvest.add_argument(
        "--withAlternateNames",
        dest="with_alternate_names",
        action="store_true",
        default=None,
        help="Index the alternate_names field",
    )
    p_harvest.add_argument(
        "--countryIdsToBoost",
        dest="country_boosts",
        type=parse_codes,
        default=None,
        help="Comma separated country codes to boost, e.g. AU,FR",
    )
    p_harvest.add_argument("--batch-size", type=int)
    p_harvest.add_argument("--progress", action="store_true")
    p_harvest.add_argument("--verbose", action="store_true", help="Log every record processed")
    p_harvest.set_defaults(func=cmd_harvest)

    p_search = sub.add_parser("search", help="Weighted place name search")
    p_search.add_argument("query")
    p_search.add_argument("-f", "--field", default="basic_name")
    p_search.add_argument("--start", type=int, default=0)
    p_search.add_argument("--rows", type=int)
    p_search.add_argument("--fq", help="Filter query, e.g. country_code:AU")
    p_search.add_argument("--debug", action="store_true", help="Print the query and facet counts")
    p_search.set_defaults(func=cmd_search)

    p_download = sub.add_parser("download", help="Download a GeoNames export dump")
    p_download.add_argument("name", help="Dump name, e.g. allCountries, cities15000 or AU")
    p_download.add_argument("--out-dir")
    p_download.add_argument("--keep-zip", action="store_true")
    p_download.set_defaults(func=cmd_download)

    return parser


def log_level(args) -> str:
    """--verbose record dumps are logged at DEBUG."""
    if getattr(args, "verbose", False):
        return "DEBUG"
    return args.log_level.upper()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=log_level(args),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    cfg = load_config(args.config)
    base_dir = os.path.dirname(os.path.abspath(args.config))

    try:
        return args.func(args, cfg, base_dir)
    except StartupError as exc:
        logger.error("%s", exc)
        parser.print_usage(sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

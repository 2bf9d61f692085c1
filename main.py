#!/usr/bin/env python3
"""
Command-line entry point for the dataset preprocessor.

Detects the platform of a CSV export, normalizes it into the canonical
account_id,content_id,object_id,timestamp_share format and optionally submits
the result to the analysis service.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from csds.analysis_client import AnalysisParameters, submit_for_analysis
from csds.config import PlatformTag, load_settings
from csds.detection import detection_message
from csds.exceptions import CsdsError
from csds.mapping import parse_mappings, run_mapping_pipeline
from csds.models import ProcessingResult
from csds.pipeline import CsvPipeline, process_csv
from csds.transforms import default_sources, get_transformer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def preprocess_file(
    input_path: str,
    account_source: Optional[str] = None,
    object_id_source: Optional[str] = None,
    mappings: Optional[List[str]] = None,
    force_chunked: Optional[bool] = None,
    pipeline: Optional[CsvPipeline] = None,
) -> ProcessingResult:
    """
    Detect and normalize one CSV file.

    Args:
        input_path: CSV export to normalize
        account_source: Account source option id (platform default if omitted)
        object_id_source: Object ID source option id (platform default if omitted)
        mappings: FIELD=INDEX manual mappings; forces the manual path
        force_chunked: Override the size-based chunking decision
        pipeline: Pipeline to run with (defaults to one built from the environment)
    """
    pipeline = pipeline or CsvPipeline()
    headers, tag = pipeline.detect(input_path)
    logger.info(detection_message(tag))

    if mappings or tag == PlatformTag.OTHER:
        if not mappings:
            raise CsdsError(
                "Unrecognized format; provide --map FIELD=INDEX for each field. Columns: "
                + ", ".join(f"{i}={h}" for i, h in enumerate(headers))
            )
        return run_mapping_pipeline(
            input_path, headers, parse_mappings(mappings), pipeline=pipeline, force_chunked=force_chunked
        )

    transformer = get_transformer(tag)
    default_account, default_object = default_sources(tag)
    account_source = account_source or default_account
    object_id_source = object_id_source or default_object
    if tag != PlatformTag.PREPROCESSED and (not account_source or not object_id_source):
        options = {
            "account sources": [o.value for o in transformer.get_account_source_options()],
            "object ID sources": [o.value for o in transformer.get_object_id_source_options()],
        }
        raise CsdsError(f"{tag.value} needs --account-source and --object-id-source; options: {options}")

    return await process_csv(
        input_path,
        transformer,
        account_source,
        object_id_source,
        pipeline=pipeline,
        force_chunked=force_chunked,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Coordinated sharing dataset preprocessor")
    parser.add_argument("input", type=str, help="CSV export to normalize")
    parser.add_argument("-o", "--output", type=str, help="Where to write the canonical CSV")
    parser.add_argument("--account-source", type=str, help="Account source option id")
    parser.add_argument("--object-id-source", type=str, help="Object ID source option id")
    parser.add_argument(
        "--map",
        dest="mappings",
        action="append",
        metavar="FIELD=INDEX",
        help="Manual column mapping, e.g. account_id=0 (repeatable)",
    )
    parser.add_argument("--chunk-size", type=int, help="Rows per chunk when reading in chunks")
    parser.add_argument("--chunked", dest="force_chunked", action="store_true", default=None,
                        help="Always read the file in chunks")
    parser.add_argument("--submit", action="store_true", help="Send the result to the analysis service")
    parser.add_argument("--analysis-url", type=str, help="Analysis service endpoint")
    parser.add_argument("--min-participation", type=int, default=2)
    parser.add_argument("--time-window", type=int, default=60)
    parser.add_argument("--subgraph", type=int, default=1)
    parser.add_argument("--edge-weight", type=float, default=0.5)
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not Path(args.input).exists():
        logger.error(f"Input file not found: {args.input}")
        return 2

    settings = load_settings()
    if args.chunk_size is not None:
        if args.chunk_size <= 0:
            logger.error("--chunk-size must be positive")
            return 2
        settings = replace(settings, chunk_size=args.chunk_size)

    try:
        result = asyncio.run(
            preprocess_file(
                args.input,
                account_source=args.account_source,
                object_id_source=args.object_id_source,
                mappings=args.mappings,
                force_chunked=args.force_chunked,
                pipeline=CsvPipeline(settings=settings),
            )
        )
    except CsdsError as e:
        logger.error(str(e))
        return 2

    logger.info(f"Summary: {result.summary.as_dict()}")
    for warning in result.warnings:
        logger.warning(warning)

    if args.output:
        Path(args.output).write_text(result.csv_text, encoding="utf-8")
        logger.info(f"Results saved to {args.output}")
    elif not args.submit:
        sys.stdout.write(result.csv_text)

    if args.submit:
        try:
            params = AnalysisParameters(
                min_participation=args.min_participation,
                time_window=args.time_window,
                subgraph=args.subgraph,
                edge_weight=args.edge_weight,
            )
        except ValidationError as e:
            logger.error(f"Invalid analysis parameters: {e}")
            return 2
        try:
            analysis = submit_for_analysis(
                result.csv_bytes, params, url=args.analysis_url or settings.analysis_url
            )
        except CsdsError as e:
            logger.error(f"Analysis failed: {e}")
            return 1
        sys.stdout.write(json.dumps(analysis, ensure_ascii=False, indent=2) + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())

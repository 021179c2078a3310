"""Command line entrypoint: JSON in → transform → JSON out.

Usage:
    python -m api_transform --alias Post < posts.json
    python -m api_transform --alias Post --input posts.json --output api.json
    python -m api_transform --alias Post --key data --no-time < response.json
"""

import argparse
import logging
import sys
import uuid
from typing import Any, Optional

from dotenv import load_dotenv

from api_transform.transform import PipelineConfig, TransformError, TransformPipeline
from api_transform.utils import (
    PipelineLogger,
    read_json,
    setup_logging,
    timed_operation,
    write_json,
)

logger = logging.getLogger(__name__)


def _record_count(data: Any) -> int:
    if isinstance(data, list):
        return len(data)
    return 1 if data else 0


def run_transform(
    payload: Any,
    primary_alias: str,
    config: Optional[PipelineConfig] = None,
    key: Optional[str] = None,
    run_id: Optional[str] = None,
) -> Any:
    """Transform a payload, optionally only one key of a JSON envelope.

    Args:
        payload: Parsed JSON document
        primary_alias: Alias of the primary model
        config: Pipeline configuration (from the environment if None)
        key: Envelope key holding the result data, e.g. "data"
        run_id: Run identifier for log lines (generated if not provided)

    Returns:
        The transformed payload. With ``key``, a copy of the envelope where
        only that key was transformed. A missing or empty value is left as is.

    Raises:
        TransformError: If the data cannot be transformed
    """
    run_id = run_id or uuid.uuid4().hex[:12]
    config = config or PipelineConfig.from_env()
    run_logger = PipelineLogger(primary_alias, run_id)

    if key is not None:
        if not isinstance(payload, dict):
            raise TransformError(
                f"Expected a JSON object envelope for key {key!r}, "
                f"got {type(payload).__name__}"
            )
        data = payload.get(key)
        if not data:
            logger.info(
                f"Nothing to transform under key {key!r}",
                extra={"run_id": run_id, "key": key}
            )
            return payload
    else:
        data = payload

    run_logger.start("transform")
    try:
        with timed_operation("transform", logger) as timer:
            result = TransformPipeline(config).transform(data, primary_alias)
    except TransformError as e:
        run_logger.error("transform", e)
        raise

    run_logger.log_transform(
        input_count=_record_count(data),
        output_count=_record_count(result),
        duration_ms=timer.duration_ms,
        wrapped=isinstance(result, dict),
    )
    run_logger.success(
        "run",
        record_count=_record_count(result),
        extra=run_logger.get_metrics(),
    )

    if key is not None:
        return {**payload, key: result}
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reshape nested ORM results into API-friendly JSON"
    )
    parser.add_argument(
        "--alias",
        required=True,
        help="Alias of the primary model in each record (e.g., Post)",
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Input JSON file (default: stdin)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output JSON file (default: stdout)",
    )
    parser.add_argument(
        "--key",
        default=None,
        help="Only transform this key of a JSON object envelope (e.g., data)",
    )
    parser.add_argument(
        "--no-nesting",
        action="store_true",
        help="Keep the primary record nested under its alias",
    )
    parser.add_argument(
        "--no-keys",
        action="store_true",
        help="Keep association keys as they are",
    )
    parser.add_argument(
        "--no-numbers",
        action="store_true",
        help="Keep numeric strings as strings",
    )
    parser.add_argument(
        "--no-time",
        action="store_true",
        help="Keep date strings as strings",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log lines as JSON",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level, json_format=args.log_json)

    overrides = {}
    if args.no_nesting:
        overrides["change_nesting"] = False
    if args.no_keys:
        overrides["change_keys"] = False
    if args.no_numbers:
        overrides["cast_numbers"] = False
    if args.no_time:
        overrides["change_time"] = False

    try:
        config = PipelineConfig.from_env(**overrides)
        payload = read_json(args.input)
        result = run_transform(payload, args.alias, config=config, key=args.key)
    except (TransformError, ValueError, OSError) as e:
        logger.error(f"Transformation failed: {e}", extra={"alias": args.alias})
        return 1

    write_json(result, args.output, indent=args.indent)
    return 0


if __name__ == "__main__":
    sys.exit(main())

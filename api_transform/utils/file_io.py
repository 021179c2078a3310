"""File I/O helpers for JSON payloads."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

STDIO_PATH = "-"


def _is_stdio(path: Optional[Union[str, Path]]) -> bool:
    return path is None or str(path) == STDIO_PATH


def read_json(file_path: Optional[Union[str, Path]] = None) -> Any:
    """Read a JSON document.

    Args:
        file_path: Path to the JSON file, or None / "-" for stdin

    Returns:
        Parsed document

    Raises:
        json.JSONDecodeError: If the input is not valid JSON
        OSError: If the file cannot be opened
    """
    if _is_stdio(file_path):
        data = json.load(sys.stdin)
        logger.debug("Read JSON document from stdin")
        return data

    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    logger.debug(f"Read JSON document from {file_path}")
    return data


def write_json(
    data: Any,
    output_path: Optional[Union[str, Path]] = None,
    indent: Optional[int] = None,
) -> dict:
    """Write a JSON document.

    Args:
        data: Document to serialize
        output_path: Output file path, or None / "-" for stdout
        indent: Indentation passed to json.dumps

    Returns:
        Metadata dict with output info
    """
    text = json.dumps(data, indent=indent, default=str, ensure_ascii=False)

    if _is_stdio(output_path):
        sys.stdout.write(text + "\n")
        sys.stdout.flush()
        metadata = {
            "file_path": STDIO_PATH,
            "size_bytes": len(text.encode("utf-8")) + 1,
        }
    else:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        metadata = {
            "file_path": str(output_path),
            "size_bytes": output_path.stat().st_size,
        }

    logger.info(
        f"Wrote JSON document to {metadata['file_path']}",
        extra=metadata
    )

    return metadata

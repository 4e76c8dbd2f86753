"""JSON output helpers for the CLIs."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


def write_json(
    data: Union[Dict[str, Any], List[Any]],
    file_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False,
) -> None:
    """Write data to JSON file with pretty printing.

    Creates parent directories if they don't exist.

    Args:
        data: Data to write (dict or list)
        file_path: Path to output JSON file
        indent: Number of spaces for indentation (default: 2)
        ensure_ascii: If False, non-ASCII characters are preserved (default: False)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)

    logger.info(f"Wrote JSON to {file_path}")

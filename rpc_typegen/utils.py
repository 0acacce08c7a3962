"""Utility functions for loading syntax-tree documents.

A front-end parser writes one JSON document per source unit; this module
reads those documents from disk with proper error handling.
"""

import json
from pathlib import Path
from typing import Union

from .codegen.core.diagnostics import FrontendError
from .codegen.frontend.syntax import SyntaxUnit, parse_unit
from .logging_config import get_logger

logger = get_logger(__name__)


def load_syntax_unit(file_path: Union[str, Path]) -> SyntaxUnit:
    """Load one syntax-tree document from a local file.

    Args:
        file_path: Path to the JSON document.

    Returns:
        Decoded SyntaxUnit (declaration nodes are decoded later, one by one).

    Raises:
        FrontendError: If the file cannot be read, is not valid JSON, or
            does not have the document shape.
    """
    file_path = Path(file_path)
    logger.debug(f"Loading syntax tree from {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FrontendError(str(file_path), "file not found")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise FrontendError(str(file_path), f"invalid JSON: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise FrontendError(str(file_path), f"cannot read file: {e}") from e

    unit = parse_unit(data, str(file_path))
    logger.info(f"Loaded {len(unit.items)} declaration nodes from {file_path}")
    return unit

"""Read legacy Terraform JSON state documents."""

import json
from pathlib import Path

from pydantic import ValidationError

from terraconf.exceptions import StateReadError, UnsupportedStateVersionError
from terraconf.models.state import StateDocument
from terraconf.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_VERSIONS = (1, 2, 3)


def parse_state(text: str, source: str = "<string>") -> StateDocument:
    """Parse state JSON text into a StateDocument.

    Args:
        text: JSON state document
        source: Where the text came from (used in error messages)

    Returns:
        Validated StateDocument

    Raises:
        UnsupportedStateVersionError: If the version is missing or not 1-3
        StateReadError: If the text is not JSON or fails validation
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateReadError(source, f"Invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise StateReadError(source, "State document is not a JSON object")

    version = data.get("version")
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedStateVersionError(source, version)

    try:
        state = StateDocument(**data)
    except ValidationError as e:
        raise StateReadError(source, f"Invalid state document:\n{e}") from e

    logger.info(
        "state_parsed",
        source=source,
        version=state.version,
        terraform_version=state.terraform_version,
        modules=len(state.modules),
    )
    return state


def read_state(path: Path) -> StateDocument:
    """Read and parse a state file.

    Raises:
        StateReadError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StateReadError(str(path), f"Cannot read state file ({e.strerror})") from e

    return parse_state(text, source=str(path))

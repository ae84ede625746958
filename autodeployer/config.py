"""
Settings Loader Module
Single Responsibility: Read and validate the batch configuration

Settings come from the process environment, optionally populated from a
.env file. Keys:

    APP_NAME, SOURCE_ITEMS, COPY_SOURCE_ITEMS, MODE, FILE, ARGUMENTS,
    TARGET_COMPUTERS, TIMEOUT (milliseconds)
    DESTINATION_ROOT (optional), LOG_DIR (optional)

TARGET_COMPUTERS is either a path to a file with one computer per line or a
comma-separated list.
"""

import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from autodeployer.errors import ConfigValidationError
from autodeployer.models.deployment import DEFAULT_DESTINATION_ROOT, BatchConfig, Mode
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_KEYS = [
    "APP_NAME",
    "SOURCE_ITEMS",
    "COPY_SOURCE_ITEMS",
    "MODE",
    "FILE",
    "ARGUMENTS",
    "TARGET_COMPUTERS",
    "TIMEOUT",
]

DEFAULT_LOG_DIR = "data/logs"

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def _require(env: Mapping[str, str], key: str) -> str:
    value = env.get(key)
    if value is None:
        raise ConfigValidationError(f"{key} is null.")
    return value


def _parse_bool(key: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigValidationError(f"{key} must be true or false, got '{value}'")


def _parse_timeout(value: str) -> int:
    try:
        timeout = int(value.strip())
    except ValueError:
        raise ConfigValidationError(f"TIMEOUT must be an integer number of milliseconds, got '{value}'")
    if timeout <= 0:
        raise ConfigValidationError("TIMEOUT must be greater than zero")
    return timeout


def _validate_mode(value: str) -> Mode:
    try:
        return Mode(value.strip())
    except ValueError:
        valid = ", ".join(m.value for m in Mode)
        raise ConfigValidationError(f"Mode must be one of the following values: {valid}")


def read_target_computers(value: str) -> List[str]:
    """
    Reads the target computer list.

    Args:
        value: Path to a computers file (one per line) or a comma-separated list

    Returns:
        Ordered list of non-blank computer names
    """
    candidate = Path(value.strip())
    if value.strip() and candidate.is_file():
        logger.debug(f"Reading target computers from file: {candidate}")
        lines = candidate.read_text(encoding="utf-8").splitlines()
    else:
        lines = value.split(",")

    targets = [line.strip() for line in lines if line.strip()]
    logger.info(f"Read {len(targets)} target computers.")
    return targets


def load_settings(
    env_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> BatchConfig:
    """
    Loads and validates the batch configuration.

    Args:
        env_file: Optional .env file loaded into the environment first
        environ: Mapping to read instead of os.environ (testing)

    Returns:
        Immutable BatchConfig

    Raises:
        ConfigValidationError: If any key is missing or invalid
    """
    if environ is None:
        if env_file is not None:
            if not Path(env_file).is_file():
                raise ConfigValidationError(f"Settings file not found: {env_file}")
            load_dotenv(env_file, override=True)
        else:
            load_dotenv()
        environ = os.environ

    for key in REQUIRED_KEYS:
        _require(environ, key)

    raw_app_name = environ["APP_NAME"].strip()
    destination_root = environ.get("DESTINATION_ROOT") or DEFAULT_DESTINATION_ROOT
    destination_path = destination_root.rstrip("\\") + "\\" + raw_app_name

    try:
        config = BatchConfig(
            app_name=raw_app_name,
            source_items=environ["SOURCE_ITEMS"].strip(),
            copy_source_items=_parse_bool("COPY_SOURCE_ITEMS", environ["COPY_SOURCE_ITEMS"]),
            mode=_validate_mode(environ["MODE"]),
            file=environ["FILE"].strip(),
            arguments=environ["ARGUMENTS"].strip(),
            destination_path=destination_path,
            timeout_ms=_parse_timeout(environ["TIMEOUT"]),
            target_computers=read_target_computers(environ["TARGET_COMPUTERS"]),
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise ConfigValidationError(f"Invalid configuration: {e}") from e

    logger.info(
        f"Configuration loaded: app={config.app_name}, mode={config.mode.value}, "
        f"file={config.file}, copy={config.copy_source_items}, "
        f"targets={len(config.target_computers)}, timeout={config.timeout_ms}ms"
    )
    return config


def log_dir_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return environ.get("LOG_DIR") or DEFAULT_LOG_DIR

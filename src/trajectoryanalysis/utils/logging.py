from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "trajectoryanalysis"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, package_level: Optional[str] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=_parse_level(level),
        format=LOG_FORMAT,
        handlers=handlers,
    )
    # Lets callers keep third-party output at INFO while tracing the analyzer at DEBUG.
    if package_level is not None:
        logging.getLogger(PACKAGE_LOGGER).setLevel(_parse_level(package_level))

# ================================================================
# PROJECT: NOISEMAP - LOCAL NOISE VISUALIZER
#
# FILE: UTILS/LOGGING_UTILS.PY - CENTRAL LOGGING SETUP
# DESCRIPTION: DEFINES THE STANDARD FORMAT AND HELPERS TO RECORD EVENTS
# ================================================================
from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOGGER_NAME = "noisemap_app"
LIBRARY_LOGGERS = ("noisemap", "utils")


# ===========================================================
# FUNCTION CONFIGURE_LOGGING: BUILDS LOGGER WITH FILE AND CONSOLE
# ===========================================================
def configure_logging(base_dir: Path, level: str = "INFO") -> logging.Logger:
    base_dir.mkdir(parents=True, exist_ok=True)
    numeric = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    log_file = logging.FileHandler(base_dir / "noisemap.log", encoding="utf-8")
    log_file.setFormatter(formatter)
    console = logging.StreamHandler()
    console.setFormatter(formatter)

    for name in (LOGGER_NAME,) + LIBRARY_LOGGERS:
        target = logging.getLogger(name)
        for handler in list(target.handlers):
            handler.close()
            target.removeHandler(handler)
        target.setLevel(numeric)
        target.addHandler(log_file)
        target.addHandler(console)

    return logging.getLogger(LOGGER_NAME)


# =======================================================
# FUNCTION LOG: FORWARDS A MESSAGE TO THE LOGGER BY LEVEL NAME
# =======================================================
def log(logger: logging.Logger, message: str, level: str = "info") -> None:
    method = getattr(logger, level.lower(), logger.info)
    method(message)

from pathlib import Path
import logging
import os


def setup_logging():
    log_file = os.environ.get("LOG_FILE")
    raw_level = os.environ.get("LOG_LEVEL", "1")
    try:
        log_level = int(raw_level)
    except ValueError:
        log_level = 1

    level_map = {
        0: logging.CRITICAL + 1,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    level = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.touch()
        handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    handler.setLevel(level)
    root_logger.addHandler(handler)

import logging
import sys

_HANDLER_NAME = "bookstore-console"


def setup_logging(log_level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    # uvicorn --reload and repeated app factories call this more than once
    if any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

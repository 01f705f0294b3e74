import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())
    # one line per request otherwise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

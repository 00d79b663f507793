import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("page_analyzer").setLevel(level)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

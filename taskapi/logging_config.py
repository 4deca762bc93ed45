import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(mode: str = "debug"):
    level = logging.INFO if mode == "release" else logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("taskapi").setLevel(level)
    # passlib probes the bcrypt backend version and logs a traceback about it
    logging.getLogger("passlib").setLevel(logging.ERROR)

import logging
import os

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def _env_level() -> str:
    return os.getenv("HEROLEDGER_LOG_LEVEL", "INFO").upper()


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger configured with basicConfig."""
    logging.basicConfig(level=_env_level(), format=LOG_FORMAT)
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Drop every heroledger logger to DEBUG, or back to the env level."""
    logging.getLogger("heroledger").setLevel(logging.DEBUG if verbose else _env_level())

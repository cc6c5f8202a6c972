# logger.py

"""Console logging helper shared by every module."""

import logging

_LOGGER_NAME = "texture_sampling"


def get_logger(name: str) -> logging.Logger:
    """Return a child of the project logger, installing the console handler once.

    Parameters
    ----------
    name : str
        Module name, typically ``__name__``.
    """
    base = logging.getLogger(_LOGGER_NAME)
    if not base.handlers:
        base.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(module)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        base.addHandler(handler)
        base.propagate = False
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def set_level(level: int) -> None:
    """Update the project logger level."""
    logging.getLogger(_LOGGER_NAME).setLevel(level)

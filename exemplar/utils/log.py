from __future__ import annotations

import logging
import sys
from logging.config import dictConfig
from typing import TYPE_CHECKING

from exemplar.settings import Settings

if TYPE_CHECKING:
    from exemplar.settings import BaseSettings


logger = logging.getLogger(__name__)

DEFAULT_LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "loggers": {
        "exemplar": {"level": "DEBUG"},
    },
}

_exemplar_root_handler: logging.Handler | None = None


class TopLevelFormatter(logging.Filter):
    """Keep only the top level part of the logger names of ``loggers``.

    With ``loggers=["exemplar"]`` a record from ``exemplar.search`` is shown as
    coming from ``exemplar``.
    """

    def __init__(self, loggers: list[str] | None = None):
        super().__init__()
        self.loggers: list[str] = loggers or []

    def filter(self, record: logging.LogRecord) -> bool:
        if any(record.name.startswith(logger + ".") for logger in self.loggers):
            record.name = record.name.split(".", 1)[0]
        return True


def configure_logging(
    settings: BaseSettings | None = None, install_root_handler: bool = True
) -> None:
    """
    Initialize logging defaults for Exemplar.

    :param settings: settings used to create and configure a handler for the
        root logger (default: None).
    :param install_root_handler: whether to install root logging handler
        (default: True)

    This function does:

    - Route warnings through python logging
    - Assign DEBUG level to the Exemplar loggers
    - Create a handler for the root logger according to the given settings
      (see below)

    The handler is built from the ``LOG_*`` settings: a file handler when
    ``LOG_FILE`` is set, a stream handler on stderr when ``LOG_ENABLED`` is
    true, nothing otherwise.
    """
    if not sys.warnoptions:
        logging.captureWarnings(True)

    dictConfig(DEFAULT_LOGGING)

    if settings is None:
        settings = Settings()

    if install_root_handler:
        install_exemplar_root_handler(settings)


def install_exemplar_root_handler(settings: BaseSettings) -> None:
    global _exemplar_root_handler  # noqa: PLW0603

    _uninstall_exemplar_root_handler()
    logging.root.setLevel(logging.NOTSET)
    _exemplar_root_handler = _get_handler(settings)
    logging.root.addHandler(_exemplar_root_handler)


def _uninstall_exemplar_root_handler() -> None:
    global _exemplar_root_handler  # noqa: PLW0603

    if (
        _exemplar_root_handler is not None
        and _exemplar_root_handler in logging.root.handlers
    ):
        logging.root.removeHandler(_exemplar_root_handler)
    _exemplar_root_handler = None


def get_exemplar_root_handler() -> logging.Handler | None:
    return _exemplar_root_handler


def _get_handler(settings: BaseSettings) -> logging.Handler:
    """Return a log handler object according to settings"""
    filename = settings.get("LOG_FILE")
    handler: logging.Handler
    if filename:
        mode = "a" if settings.getbool("LOG_FILE_APPEND") else "w"
        encoding = settings.get("LOG_ENCODING")
        handler = logging.FileHandler(filename, mode=mode, encoding=encoding)
    elif settings.getbool("LOG_ENABLED"):
        handler = logging.StreamHandler()
    else:
        handler = logging.NullHandler()

    formatter = logging.Formatter(
        fmt=settings.get("LOG_FORMAT"), datefmt=settings.get("LOG_DATEFORMAT")
    )
    handler.setFormatter(formatter)
    handler.setLevel(settings.get("LOG_LEVEL"))
    if settings.getbool("LOG_SHORT_NAMES"):
        handler.addFilter(TopLevelFormatter(["exemplar"]))
    return handler


def log_exemplar_info(settings: BaseSettings) -> None:
    from exemplar import __version__
    from exemplar.settings import overridden_settings

    logger.info("Exemplar %(version)s started", {"version": __version__})
    d = dict(overridden_settings(settings))
    if d:
        logger.info("Overridden settings: %(settings)r", {"settings": d})

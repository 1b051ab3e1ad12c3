import logging
import sys


class Log:
    """Centralized logging for the docvault service."""

    _logger: logging.Logger = logging.getLogger("docvault")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stdout handler once.

        Analysis runs on pool threads, so each line carries its thread name.
        """
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(threadName)s %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def degraded(cls, category: type[Warning], message: str) -> None:
        """Log a non-fatal condition tagged with its warning category.

        Warning categories (e.g. CounterUpdateWarning) are never raised; they
        only label the log line so operators can grep for them.
        """
        cls._logger.warning(f"[{category.__name__}] {message}")

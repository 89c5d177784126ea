import logging
import sys

# Context keys whose values never reach the log output.
_REDACTED_MARKERS = ("secret", "signature", "password", "token", "email", "api_key")
_REDACTED = "[redacted]"


def _render_context(context: dict[str, object]) -> str:
    parts = []
    for key, value in context.items():
        if any(marker in key.lower() for marker in _REDACTED_MARKERS):
            value = _REDACTED
        parts.append(f"{key}={value}")
    return " ".join(parts)


class _ContextFormatter(logging.Formatter):
    """Appends the keyword context of a Log call as key=value pairs."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} | {_render_context(context)}"
        return line


class Log:
    """Process-wide logger for the pipeline.

    Ids go in keyword context (``Log.info("Claimed batch", queue=name, count=3)``);
    values under secret-looking keys are replaced before formatting.
    """

    _logger: logging.Logger = logging.getLogger("fleetlead")

    @classmethod
    def configure(cls, log_level: str) -> None:
        cls._logger.setLevel(log_level.upper())
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(_ContextFormatter("%(asctime)s [%(levelname)s] %(message)s"))
            cls._logger.addHandler(handler)

    @classmethod
    def _emit(cls, level: int, message: str, context: dict[str, object], **options: bool) -> None:
        cls._logger.log(level, message, extra={"context": context}, **options)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._emit(logging.DEBUG, message, context)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._emit(logging.INFO, message, context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._emit(logging.WARNING, message, context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._emit(logging.ERROR, message, context)

    @classmethod
    def exception(cls, message: str, **context: object) -> None:
        """Log at ERROR with the active exception's traceback."""
        cls._emit(logging.ERROR, message, context, exc_info=True)

import json
import logging

from logunify.constants import LOGGER_NAME, LOGGER_LABEL


class LogUnifyFormatter(logging.Formatter):
    """
    Console format: `<timestamp> [LogUnify] <level>: <message>`, followed by
    `, data: <json>` when the record carries structured `event` data.
    """

    def __init__(self):
        super().__init__(fmt=f"%(asctime)s [{LOGGER_LABEL}] %(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base_format = super().format(record)
        event = getattr(record, "event", None)
        if event is not None:
            return f"{base_format}, data: {json.dumps(event, default=str)}"
        return base_format


def configure_logger(enable_debug_log: bool) -> logging.Logger:
    """Attach the console handler once and set the package log level."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h.formatter, LogUnifyFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(LogUnifyFormatter())
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if enable_debug_log else logging.INFO)
    return logger

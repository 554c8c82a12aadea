import logging
import sys
from pythonjsonlogger import jsonlogger

# Define the logger
logger = logging.getLogger("support_resolver")


def setup_logging(level: str = "INFO"):
    """Setup structured JSON logging."""
    handler = logging.StreamHandler(sys.stdout)

    formatter = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(levelname)s %(name)s %(message)s'
    )
    handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[handler])

    logger.setLevel(level)

    # Prevent propagation to avoid double logging if root logger is used
    logger.propagate = False
    if not any(isinstance(h.formatter, jsonlogger.JsonFormatter) for h in logger.handlers):
        logger.addHandler(handler)

    # Silence some noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


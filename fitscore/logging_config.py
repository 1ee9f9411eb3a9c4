"""
Logging configuration for the FitScore app.
"""
import logging
import sys


def setup_logging(log_level: str = "INFO"):
    """
    Configure the root logger with a single stdout handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    # create_app may run more than once per process (workers, tests)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(console_handler)

    # Set levels for third-party libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("rq.worker").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def sanitize_log_data(data: dict) -> dict:
    """
    Mask values whose key looks like a secret.

    Args:
        data: Dictionary to sanitize

    Returns:
        Copy of ``data`` with secret-looking values replaced
    """
    sanitized = data.copy()
    sensitive_keys = ["password", "token", "secret", "key", "database_url", "database_uri"]

    for key in sanitized:
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            sanitized[key] = "***REDACTED***" if sanitized[key] else None

    return sanitized

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(app) -> None:
    """Configure the root logger from LOG_LEVEL; module loggers propagate to it."""
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)

    # werkzeug's request log is noisy below INFO
    logging.getLogger("werkzeug").setLevel(max(level, logging.INFO))
    if not app.config.get("SQL_ECHO"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

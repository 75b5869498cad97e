import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Closes and detaches every handler this module attached to the named logger.
def close_handlers(name = "elapsedtimer"):
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if handler.get_name() and handler.get_name().startswith(f"{name}:"):
            logger.removeHandler(handler)
            handler.close()

# (Re)configures the named logger from scratch: whatever this module attached before is closed, then exactly the
# requested handlers are attached. Nothing touches the disk unless a log_dir is given.
def get_logger(
        name = "elapsedtimer",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        console = False,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)
    close_handlers(name)

    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)
    handlers = []

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True,exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.set_name(f"{name}:file")
        handlers.append(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.set_name(f"{name}:console")
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger

# No handlers by default, so only warnings and errors reach stderr through logging's last resort handler.
log = get_logger(level=logging.INFO)

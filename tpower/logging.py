import logging
import sys

COLORS = {
    "grey": "\x1b[38;20m",
    "yellow": "\x1b[33;20m",
    "red": "\x1b[31;20m",
    "green": "\x1b[38;5;10m",
    "blue": "\x1b[38;5;27m",
    "reset": "\x1b[0m",
}

# Color of the level name, by level
LEVEL_COLORS = {
    logging.DEBUG: "grey",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class LevelColorFormatter(logging.Formatter):
    """Formatter that colors the level name of each record."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = COLORS[LEVEL_COLORS.get(record.levelno, "grey")]
        return line.replace(
            record.levelname,
            color + record.levelname + COLORS["reset"],
            1,
        )


def colorize(text: str, color: str) -> str:
    return COLORS[color] + text + COLORS["reset"]


def log(logger_method, text: str, color: str) -> None:
    """
    Log a text in a color, e.g., `log(logger.info, "POW = 0.34", "green")`.
    """
    logger_method(colorize(text, color))


def get_logger(module_name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Returns the stdout logger of a tpower module. Calling it again for the
    same module reuses the handler already attached.

    Args:
        module_name (str): name of the module.
        level (int): logging level.

    Returns:
        logging.Logger: the logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            LevelColorFormatter(
                "[%(asctime)s] - %(levelname)s - %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger

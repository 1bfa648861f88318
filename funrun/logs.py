import logging

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install one console handler on the package logger.
    Calling it again only changes the level.
    """
    logger = logging.getLogger("funrun")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_funrun", False) for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(FORMAT))
        console._funrun = True  # type: ignore[attr-defined]
        logger.addHandler(console)

    logger.propagate = False

import logging
import sys

ROOT = "mash_matrix"
FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

def get_logger(name: str, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(f"{ROOT}.{name}")
    root = logging.getLogger(ROOT)
    if not root.handlers:
        root.setLevel(logging.DEBUG if verbose else logging.INFO)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FMT))
        root.addHandler(handler)
    return logger

def set_verbosity(verbose: bool = False, quiet: bool = False) -> None:
    """Switch every package logger between DEBUG, INFO and WARNING."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.getLogger(ROOT).setLevel(level)

"""
Logging setup for the node importer.

Every module logs through one of the named loggers below. configure_logging()
routes them to stdout (and optionally a file) and attaches the warning
suppression filter to the loggers that report per-field problems.
"""
import logging
import sys
from collections import Counter
from typing import Optional, List

from node_importer.config import LOG_FORMAT, SUPPRESSED_WARNINGS

# --- Logger Instances ---
index_logger = logging.getLogger("ontology_index")  # Document scans and queries
closure_logger = logging.getLogger("ontology_closure")  # Hierarchy closures and strategies
vocab_logger = logging.getLogger("vocabulary_import")  # Vocabularies and tags
node_logger = logging.getLogger("node_import")  # Flattening and writing nodes
link_logger = logging.getLogger("reference_linking")  # Deferred reference pass
main_logger = logging.getLogger("node_importer_main")  # Command line entry point

# Loggers whose repetitive warnings may be suppressed
FILTERED_LOGGERS = (vocab_logger, node_logger, link_logger)

# Number of swallowed messages per suppression pattern
_suppressed_counts: Counter = Counter()


class WarningSuppressionFilter(logging.Filter):
    """
    Drops WARNING records containing one of the configured substrings and
    counts them per substring.
    """
    def __init__(self, suppressed_warnings=None):
        super().__init__()
        self.suppressed_warnings = list(suppressed_warnings or [])

    def match(self, message: str) -> Optional[str]:
        return next((pattern for pattern in self.suppressed_warnings if pattern in message), None)

    def filter(self, record):
        if record.levelno != logging.WARNING:
            return True
        pattern = self.match(record.getMessage())
        if pattern is None:
            return True
        _suppressed_counts[pattern] += 1
        return False


def _reset_root_logger(log_level: int) -> logging.Logger:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    console.setLevel(log_level)
    root_logger.addHandler(console)
    root_logger.setLevel(log_level)
    return root_logger


def _install_suppression_filter() -> WarningSuppressionFilter:
    warning_filter = WarningSuppressionFilter(SUPPRESSED_WARNINGS)
    for filtered in FILTERED_LOGGERS:
        # Replace filters from an earlier configuration so nothing is counted twice
        for previous in [f for f in filtered.filters if isinstance(f, WarningSuppressionFilter)]:
            filtered.removeFilter(previous)
        filtered.addFilter(warning_filter)
    return warning_filter


def configure_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    handlers: Optional[List[logging.Handler]] = None
) -> None:
    """
    Configure the root logger for an import run.

    Args:
        log_level: The logging level to use (default: INFO)
        log_file: Optional path of a log file written next to stdout
        handlers: Optional extra handlers for the root logger
    """
    root_logger = _reset_root_logger(log_level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    for handler in handlers or []:
        root_logger.addHandler(handler)

    warning_filter = _install_suppression_filter()

    main_logger.info(f"Logging configured at {logging.getLevelName(log_level)} level.")
    if log_file:
        main_logger.info(f"Writing log to {log_file}")
    main_logger.info(
        f"Suppressing {len(warning_filter.suppressed_warnings)} warning pattern(s) on "
        f"{', '.join(filtered.name for filtered in FILTERED_LOGGERS)}."
    )


def log_suppressed_message_counts() -> None:
    """Log how many warnings each suppression pattern swallowed during the run."""
    if not _suppressed_counts:
        return
    main_logger.info("Suppressed warnings summary:")
    for pattern, count in _suppressed_counts.most_common():
        main_logger.info(f"  '{pattern}': {count} message(s)")

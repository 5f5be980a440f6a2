import logging
import re
from typing import Iterable, Union


_HEX_DIGEST = re.compile(r"\b([0-9a-fA-F]{8})[0-9a-fA-F]{48}([0-9a-fA-F]{8})\b")


class DigestAbbrevFilter(logging.Filter):
    """Shorten 64-char hex digests in log records to head..tail."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
            short = _HEX_DIGEST.sub(r"\1..\2", msg)
            if short != msg:
                record.msg = short
                record.args = None
        except Exception:
            # leave malformed records for the handler to report
            pass
        return True


def setup_logging(
    level: Union[int, str] = logging.INFO,
    loggers: Iterable[str] = ("merkle_toolkit", "merkle_cli"),
) -> None:
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level)
    # logger filters do not see records propagated from child loggers
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, DigestAbbrevFilter) for f in handler.filters):
            handler.addFilter(DigestAbbrevFilter())
    for name in loggers:
        logging.getLogger(name).setLevel(level)

"""
Console logging setup with masking of credentials that pass through the proxy
"""
import logging
import re
import sys

from inquiry_admin.core.config import settings


class SensitiveDataFilter(logging.Filter):
    """Mask bearer tokens and cookie values in log messages"""

    SENSITIVE_PATTERNS = [
        (r'Bearer\s+([^\s"\';]+)', r'Bearer ***'),
        (r'access_token=([^\s"\';]+)', r'access_token=***'),
        (r'Cookie:\s*([^\n"]+)', r'Cookie: ***'),
    ]

    def _mask(self, text: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask(record.msg)
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


_configured = False


def setup_logging(level: str | None = None) -> None:
    """
    Install a single console handler on the package logger.
    Safe to call more than once (startup + tests).
    """
    global _configured
    logger = logging.getLogger("inquiry_admin")
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    # uvicorn configures the root logger too; avoid printing every record twice
    logger.propagate = False
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )
    handler.addFilter(SensitiveDataFilter())
    logger.addHandler(handler)
    _configured = True

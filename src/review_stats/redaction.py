"""Keep the GitHub credential out of log output."""

from __future__ import annotations

import logging

CENSORED = "CENSORED"


class TokenRedactionFilter(logging.Filter):
    """Replace every occurrence of a secret in log messages with a placeholder."""

    def __init__(self, secret: str, placeholder: str = CENSORED) -> None:
        super().__init__()
        self._secret = secret
        self._placeholder = placeholder

    def redact(self, text: str) -> str:
        if not self._secret:
            return text
        return text.replace(self._secret, self._placeholder)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


def install_redaction(secret: str, logger: logging.Logger | None = None) -> TokenRedactionFilter:
    """Attach a :class:`TokenRedactionFilter` to every handler of *logger*.

    Defaults to the root logger.  Handler-level filters also see records
    propagated from child loggers, which logger-level filters do not.
    """
    target = logger if logger is not None else logging.getLogger()
    redaction = TokenRedactionFilter(secret)
    for handler in target.handlers:
        handler.addFilter(redaction)
    return redaction

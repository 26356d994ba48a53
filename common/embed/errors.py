class EmbedEmailError(Exception):
    """Fatal, user-visible failure while embedding one email or a batch."""


class NotHtmlEmail(EmbedEmailError):
    pass


class HtmlParseError(EmbedEmailError):
    pass


class NoInputFiles(EmbedEmailError):
    pass


class UnknownContentType(Exception):
    """No known signature matched the leading bytes of a blob."""


class FetchError(Exception):
    """A single download failed: network error, timeout or non-2xx status."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason

from .errors import (
    EmbedEmailError,
    FetchError,
    HtmlParseError,
    NoInputFiles,
    NotHtmlEmail,
    UnknownContentType,
)
from .types import ContentIdentity, Email, EmbeddedAttachment, FetchedResource

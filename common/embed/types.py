from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class EmbeddedAttachment(BaseModel):
    name: str
    content: bytes
    mime: str = "application/octet-stream"
    inline: bool = True
    content_id: Optional[str] = None

    @property
    def cid(self) -> str:
        return self.content_id or self.name


class FetchedResource(BaseModel):
    url: str
    path: Path
    size_bytes: int


class ContentIdentity(BaseModel):
    basename: str
    mime: str
    extension: str

    @property
    def name(self) -> str:
        return f"{self.basename}.{self.extension}"


class Email(BaseModel):
    headers: list[tuple[str, str]] = []
    html: Optional[str] = None
    text: Optional[str] = None
    attachments: list[EmbeddedAttachment] = []

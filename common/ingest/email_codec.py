from __future__ import annotations

from email import policy
from email.message import EmailMessage, Message
from email.parser import BytesParser
from typing import Iterator, List, Optional, Tuple

from common.embed.types import Email, EmbeddedAttachment

_BODY_HEADERS = {
    "content-type",
    "content-transfer-encoding",
    "content-disposition",
    "content-id",
    "mime-version",
}


def _leaves(msg: Message) -> Iterator[Message]:
    if msg.get_content_maintype() == "multipart":
        for sub in msg.get_payload():
            yield from _leaves(sub)
    else:
        yield msg


def _part_bytes(part: Message) -> bytes:
    if part.get_content_type() == "message/rfc822":
        inner = part.get_payload(0)
        return inner.as_bytes(policy=policy.default)
    payload = part.get_payload(decode=True)
    return payload if isinstance(payload, (bytes, bytearray)) else b""


def _to_attachment(part: Message, index: int) -> EmbeddedAttachment:
    ctype = part.get_content_type()
    cid = (part.get("Content-ID") or "").strip().strip("<>") or None
    disp = part.get_content_disposition()
    name = part.get_filename() or cid or f"part-{index}.{part.get_content_subtype()}"
    return EmbeddedAttachment(
        name=name,
        content=bytes(_part_bytes(part)),
        mime=ctype,
        inline=bool(cid) and disp != "attachment",
        content_id=cid,
    )


def _body_content(part: Optional[EmailMessage]) -> Optional[str]:
    if part is None:
        return None
    content = part.get_content()
    return content if isinstance(content, str) else content.decode("utf-8", errors="replace")


def decode_email(raw_bytes: bytes) -> Email:
    msg: EmailMessage = BytesParser(policy=policy.default).parsebytes(raw_bytes)

    headers: List[Tuple[str, str]] = [
        (name, str(value)) for name, value in msg.items() if name.lower() not in _BODY_HEADERS
    ]

    html_part = msg.get_body(preferencelist=("html",))
    text_part = msg.get_body(preferencelist=("plain",))

    atts: List[EmbeddedAttachment] = []
    for index, part in enumerate(_leaves(msg)):
        if part is html_part or part is text_part:
            continue
        atts.append(_to_attachment(part, index))

    return Email(
        headers=headers,
        html=_body_content(html_part),
        text=_body_content(text_part),
        attachments=atts,
    )


def _split_mime(mime: str) -> Tuple[str, str]:
    maintype, _, subtype = mime.partition("/")
    if not maintype or not subtype:
        return "application", "octet-stream"
    return maintype, subtype


def _add_attachment(msg: EmailMessage, att: EmbeddedAttachment) -> None:
    maintype, subtype = _split_mime(att.mime)
    if (maintype, subtype) == ("message", "rfc822"):
        inner = BytesParser(policy=policy.default).parsebytes(att.content)
        msg.add_attachment(inner, filename=att.name)
        return
    msg.add_attachment(att.content, maintype=maintype, subtype=subtype, filename=att.name)


def encode_email(email: Email) -> bytes:
    """Rebuild a MIME message: text/html alternative, inline parts related to the html."""
    if email.html is None:
        raise ValueError("cannot encode an email without an html body")

    msg = EmailMessage()
    for name, value in email.headers:
        msg[name] = value

    if email.text is not None:
        msg.set_content(email.text)
        msg.add_alternative(email.html, subtype="html")
        html_part = msg.get_body(preferencelist=("html",))
    else:
        msg.set_content(email.html, subtype="html")
        html_part = msg

    for att in email.attachments:
        if not att.inline:
            continue
        maintype, subtype = _split_mime(att.mime)
        html_part.add_related(
            att.content,
            maintype=maintype,
            subtype=subtype,
            cid=f"<{att.cid}>",
            disposition="inline",
            filename=att.name,
        )

    for att in email.attachments:
        if not att.inline:
            _add_attachment(msg, att)

    return msg.as_bytes()

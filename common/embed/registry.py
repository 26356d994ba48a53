from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

from .errors import UnknownContentType
from .identity import content_identity
from .types import EmbeddedAttachment

LOG = logging.getLogger(__name__)


def register(
    fetched: Mapping[str, Path],
    existing: Sequence[EmbeddedAttachment],
) -> Tuple[List[EmbeddedAttachment], Dict[str, str]]:
    """Fold fetched blobs into the email's attachments.

    ``existing`` seeds a name-keyed table. Each fetched URL becomes an inline
    attachment named ``<url hash>.<sniffed ext>`` unless an attachment of that
    name is already present, in which case that one is reused. Returns the final
    attachments (existing first, in their original order) and the URL ->
    content-id mapping for the URLs that could be embedded.
    """
    attachments: List[EmbeddedAttachment] = list(existing)
    by_name: Dict[str, int] = {}
    for i, att in enumerate(attachments):
        by_name.setdefault(att.name, i)

    url_to_id: Dict[str, str] = {}
    for url in sorted(fetched):
        path = fetched[url]
        try:
            data = Path(path).read_bytes()
            ident = content_identity(url, data)
        except UnknownContentType as exc:
            LOG.warning("cannot embed %s: %s", url, exc)
            continue
        except OSError as exc:
            LOG.warning("cannot read cached %s for %s: %s", path, url, exc)
            continue

        i = by_name.get(ident.name)
        if i is None:
            by_name[ident.name] = len(attachments)
            attachments.append(EmbeddedAttachment(name=ident.name, content=data, mime=ident.mime))
        elif not attachments[i].inline:
            # referenced from the html now, so it needs a Content-ID
            attachments[i] = attachments[i].model_copy(update={"inline": True})
        url_to_id[url] = attachments[by_name[ident.name]].cid

    return attachments, url_to_id

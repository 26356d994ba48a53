from __future__ import annotations

from pathlib import Path

from cli.app.config import settings


class MediaCache:
    """Directory of fetched blobs, one file per URL, named by the URL's identity."""

    def __init__(self, root: str | Path = settings.media_dir) -> None:
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def put(self, name: str, data: bytes) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        path.write_bytes(data)
        return path.resolve()

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

DEFAULT_UPLOAD_MIME = "application/octet-stream"


@dataclass(frozen=True)
class UploadFile:
    filename: str
    content: bytes
    mime_type: str = DEFAULT_UPLOAD_MIME

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "UploadFile":
        path = Path(path)
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_UPLOAD_MIME
        return cls(filename=path.name, content=path.read_bytes(), mime_type=mime_type)

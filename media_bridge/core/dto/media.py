from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, Literal, Optional, Union

from .author import AuthorDTO
from .size import SizeDescriptor


MediaKind = Literal["image", "video", "audio", "document", "generic"]


@dataclass(frozen=True, kw_only=True)
class MediaItemDTO:
    """Fields shared by every media item variant."""

    kind: ClassVar[MediaKind]
    # meta and sizes are dicts, so items compare by value but cannot be hashed
    __hash__ = None

    id: str
    mime_type: str

    url: str = ""
    filename: str = ""
    link: str = ""
    title: str = ""
    caption: Optional[str] = None
    alt: Optional[str] = None
    name: str = ""

    # epoch seconds
    date: Optional[int] = None
    modified: Optional[int] = None

    file_size: int = 0
    author: Optional[AuthorDTO] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    sizes: Dict[str, SizeDescriptor] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.kind
        return data


@dataclass(frozen=True, kw_only=True)
class ImageItem(MediaItemDTO):
    kind: ClassVar[MediaKind] = "image"
    __hash__ = None

    width: int = 0
    height: int = 0


@dataclass(frozen=True, kw_only=True)
class VideoItem(MediaItemDTO):
    kind: ClassVar[MediaKind] = "video"
    __hash__ = None

    duration: Optional[str] = None
    image: Optional[str] = None
    thumb: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class AudioItem(MediaItemDTO):
    kind: ClassVar[MediaKind] = "audio"
    __hash__ = None

    duration: Optional[str] = None
    image: Optional[str] = None
    thumb: Optional[str] = None
    album: Optional[str] = None
    artist: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class DocumentItem(MediaItemDTO):
    kind: ClassVar[MediaKind] = "document"
    __hash__ = None


@dataclass(frozen=True, kw_only=True)
class GenericItem(MediaItemDTO):
    kind: ClassVar[MediaKind] = "generic"
    __hash__ = None


MediaItem = Union[ImageItem, VideoItem, AudioItem, DocumentItem, GenericItem]

ITEM_CLASSES: Dict[MediaKind, type] = {
    "image": ImageItem,
    "video": VideoItem,
    "audio": AudioItem,
    "document": DocumentItem,
    "generic": GenericItem,
}

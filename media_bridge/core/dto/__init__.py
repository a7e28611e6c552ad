from media_bridge.core.dto.author import AuthorDTO
from media_bridge.core.dto.page import MediaPageDTO
from media_bridge.core.dto.query import EMBED_RELATIONS, QuerySpec
from media_bridge.core.dto.upload import UploadFile

# Raw API records
from media_bridge.core.dto.raw import (
    RawAuthor,
    RawFeaturedMedia,
    RawMediaDetails,
    RawMediaRecord,
    RawSize,
)

# Image sizes
from media_bridge.core.dto.size import (
    DEFAULT_SIZE_NAMES,
    DEFAULT_SIZE_PRESETS,
    SizeDescriptor,
    SizePreset,
    orientation_for,
)

# Media items
from media_bridge.core.dto.media import (
    ITEM_CLASSES,
    AudioItem,
    DocumentItem,
    GenericItem,
    ImageItem,
    MediaItem,
    MediaItemDTO,
    MediaKind,
    VideoItem,
)

__all__ = [
    "AuthorDTO",
    "MediaPageDTO",
    "EMBED_RELATIONS",
    "QuerySpec",
    "UploadFile",

    # Raw
    "RawAuthor",
    "RawFeaturedMedia",
    "RawMediaDetails",
    "RawMediaRecord",
    "RawSize",

    # Sizes
    "DEFAULT_SIZE_NAMES",
    "DEFAULT_SIZE_PRESETS",
    "SizeDescriptor",
    "SizePreset",
    "orientation_for",

    # Media
    "ITEM_CLASSES",
    "AudioItem",
    "DocumentItem",
    "GenericItem",
    "ImageItem",
    "MediaItem",
    "MediaItemDTO",
    "MediaKind",
    "VideoItem",
]

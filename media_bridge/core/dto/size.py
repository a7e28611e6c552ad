from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping


Orientation = Literal["portrait", "landscape"]


def orientation_for(width: int, height: int) -> Orientation:
    # Square renditions count as landscape.
    return "portrait" if height > width else "landscape"


@dataclass(frozen=True)
class SizeDescriptor:
    width: int
    height: int
    orientation: Orientation
    url: str

    @classmethod
    def build(cls, width: int, height: int, url: str) -> "SizeDescriptor":
        return cls(
            width=width,
            height=height,
            orientation=orientation_for(width, height),
            url=url,
        )


@dataclass(frozen=True)
class SizePreset:
    """A host-registered image size (nominal dimensions)."""
    width: int
    height: int


# WordPress core defaults.
DEFAULT_SIZE_PRESETS: Mapping[str, SizePreset] = MappingProxyType({
    "thumbnail": SizePreset(width=150, height=150),
    "medium": SizePreset(width=300, height=300),
    "medium_large": SizePreset(width=768, height=0),
    "large": SizePreset(width=1024, height=1024),
})

DEFAULT_SIZE_NAMES = ("thumbnail", "medium", "large")

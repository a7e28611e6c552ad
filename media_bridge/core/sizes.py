from __future__ import annotations

from typing import Dict, Iterable, Mapping

from media_bridge.core.dto.raw import RawMediaRecord
from media_bridge.core.dto.size import (
    DEFAULT_SIZE_NAMES,
    DEFAULT_SIZE_PRESETS,
    SizeDescriptor,
    SizePreset,
)

FULL_SIZE = "full"


def resolve_sizes(
    record: RawMediaRecord,
    presets: Mapping[str, SizePreset] = DEFAULT_SIZE_PRESETS,
    names: Iterable[str] = DEFAULT_SIZE_NAMES,
) -> Dict[str, SizeDescriptor]:
    """
    Map size names to renditions of ``record``.

    An upstream rendition of the same name wins; otherwise a registered preset
    supplies nominal dimensions and the full-size URL stands in for the
    missing crop. Names with neither are left out. ``full`` is always present
    and built from the record's own dimensions.
    """
    details = record.media_details
    sizes: Dict[str, SizeDescriptor] = {}

    for name in names:
        if name == FULL_SIZE:
            continue
        upstream = details.sizes.get(name)
        if upstream is not None:
            sizes[name] = SizeDescriptor.build(
                upstream.width,
                upstream.height,
                upstream.source_url or record.source_url,
            )
            continue
        preset = presets.get(name)
        if preset is not None:
            sizes[name] = SizeDescriptor.build(preset.width, preset.height, record.source_url)

    sizes[FULL_SIZE] = SizeDescriptor.build(details.width, details.height, record.source_url)
    return sizes

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Sub-resources requested inline through ?_embed=
EMBED_RELATIONS = "author,wp:featuredmedia"


@dataclass(frozen=True)
class QuerySpec:
    """A media query in the remote API's vocabulary."""

    page: int = 1
    per_page: int = 40
    order: Optional[str] = None
    order_by: Optional[str] = None
    search: Optional[str] = None
    media_type: Optional[str] = None
    mime_type: Optional[str] = None
    embed: bool = True

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": self.page, "per_page": self.per_page}
        if self.order:
            params["order"] = self.order
        if self.order_by:
            params["orderby"] = self.order_by
        if self.search:
            params["search"] = self.search
        if self.media_type:
            params["media_type"] = self.media_type
        if self.mime_type:
            params["mime_type"] = self.mime_type
        if self.embed:
            params["_embed"] = EMBED_RELATIONS
        return params

"""WordPress REST models.

ContentItem mirrors what /wp-json/wp/v2/{type} returns for posts, rooms,
amenities and tourist spots. Only the fields the site reads are declared;
everything else is kept as extra data.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Rendered(BaseModel):
    """WordPress rich-text wrapper ({"rendered": "<p>...</p>"})."""

    model_config = ConfigDict(extra="ignore")

    rendered: str = ""


class MediaSize(BaseModel):
    model_config = ConfigDict(extra="allow")

    source_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    mime_type: Optional[str] = None


class MediaDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    sizes: Dict[str, MediaSize] = Field(default_factory=dict)

    @field_validator("sizes", mode="before")
    @classmethod
    def drop_malformed_sizes(cls, v):
        # Some image sizes come back as [] or false when they were never generated
        if not isinstance(v, dict):
            return {}
        return {k: s for k, s in v.items() if isinstance(s, dict)}


class FeaturedMedia(BaseModel):
    """An entry of _embedded["wp:featuredmedia"]."""

    model_config = ConfigDict(extra="allow")

    source_url: Optional[str] = None
    alt_text: Optional[str] = None
    media_details: Optional[MediaDetails] = None

    @field_validator("media_details", mode="before")
    @classmethod
    def empty_details_to_none(cls, v):
        return v if isinstance(v, dict) else None


class Embedded(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    featured_media: List[FeaturedMedia] = Field(
        default_factory=list, alias="wp:featuredmedia"
    )

    @field_validator("featured_media", mode="before")
    @classmethod
    def keep_media_objects(cls, v):
        # Unresolvable media shows up as {"code": "rest_forbidden", ...}
        if not isinstance(v, list):
            return []
        return [m for m in v if isinstance(m, dict) and "code" not in m]


class BetterFeaturedImage(BaseModel):
    model_config = ConfigDict(extra="allow")

    source_url: Optional[str] = None


class ContentItem(BaseModel):
    """A post-like record from the remote content source.

    Read-only: the site never writes back and never keeps a copy between
    requests.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    slug: str = ""
    title: Rendered = Field(default_factory=Rendered)
    content: Rendered = Field(default_factory=Rendered)
    excerpt: Optional[Rendered] = None
    acf: Optional[Dict[str, Any]] = None
    embedded: Optional[Embedded] = Field(default=None, alias="_embedded")
    featured_media: Optional[int] = None

    # Flat fields exposed by the rooms endpoint on some installs
    featured_title: Optional[str] = None
    room_rates: Optional[str] = None
    room_size: Optional[str] = None
    bed_type: Optional[str] = None
    max_guests: Optional[Union[int, str]] = None
    better_featured_image: Optional[BetterFeaturedImage] = None

    @field_validator("acf", mode="before")
    @classmethod
    def acf_list_to_none(cls, v):
        # ACF serializes "no fields" as an empty list
        if isinstance(v, dict):
            return v
        return None

    @field_validator("room_rates", "room_size", "bed_type", "featured_title", mode="before")
    @classmethod
    def scalar_to_str(cls, v):
        if v is None or v == "" or v is False:
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("better_featured_image", mode="before")
    @classmethod
    def image_or_none(cls, v):
        return v if isinstance(v, dict) else None

    @field_validator("featured_media", mode="before")
    @classmethod
    def zero_media_to_none(cls, v):
        return v or None

    def acf_value(self, key: str, default: Any = None) -> Any:
        if not self.acf:
            return default
        value = self.acf.get(key)
        return default if value is None else value

    @property
    def featured_media_items(self) -> List[FeaturedMedia]:
        if self.embedded is None:
            return []
        return self.embedded.featured_media


class NormalizedRoom(BaseModel):
    """Canonical room view handed to the UI. Recomputed on every fetch."""

    id: int
    slug: str
    name: str
    rate: str
    price_per_night: float = 0.0
    capacity: Optional[int] = None
    size: Optional[str] = None
    bed_type: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    gallery: List[Any] = Field(default_factory=list)
    image_url: str
    description: str = ""
    short_description: str = ""
    details: str = ""


class ContentSummary(BaseModel):
    """Card view of an amenity, tourist spot, page or post."""

    id: int
    slug: str
    title: str
    excerpt: str = ""
    content_html: str = ""
    image_url: Optional[str] = None

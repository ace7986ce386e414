"""Request payloads for RPC procedures and auth routes."""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from orpheus_common.utils import decode_list


def _split_list(value: Any) -> Any:
    # Admin forms send tags/authors as one comma-joined string
    if isinstance(value, str):
        return decode_list(value)
    return value


StrList = Annotated[list[str], BeforeValidator(_split_list)]


class RpcInput(BaseModel):
    """camelCase on the wire, snake_case attributes in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def provided(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Explicitly provided values only; None counts as omitted."""
        return self.model_dump(exclude=exclude, exclude_none=True)


class IdInput(RpcInput):
    id: int


class ListInput(RpcInput):
    featured: Optional[bool] = None
    category: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)


class PhotoListInput(ListInput):
    pass


class PublishableListInput(ListInput):
    published: Optional[bool] = None


class BackgroundListInput(RpcInput):
    active: Optional[bool] = None
    limit: Optional[int] = Field(default=None, ge=1)


class PhotoCreate(RpcInput):
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    camera: Optional[str] = None
    lens: Optional[str] = None
    settings: Optional[str] = None
    image_url: str
    image_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    featured: Optional[bool] = None
    sort_order: Optional[int] = None
    published_at: Optional[datetime] = None


class PhotoUpdate(RpcInput):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    camera: Optional[str] = None
    lens: Optional[str] = None
    settings: Optional[str] = None
    image_url: Optional[str] = None
    image_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    featured: Optional[bool] = None
    sort_order: Optional[int] = None
    published_at: Optional[datetime] = None


class EssayCreate(RpcInput):
    title: str
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: str
    cover_image_url: Optional[str] = None
    cover_image_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    read_time: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None


class EssayUpdate(RpcInput):
    id: int
    title: Optional[str] = None
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image_url: Optional[str] = None
    cover_image_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    read_time: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None


class PaperCreate(RpcInput):
    title: str
    authors: StrList = Field(min_length=1)
    abstract: Optional[str] = None
    journal: Optional[str] = None
    year: Optional[int] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    pdf_url: Optional[str] = None
    pdf_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    citations: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None


class PaperUpdate(RpcInput):
    id: int
    title: Optional[str] = None
    authors: Optional[StrList] = None
    abstract: Optional[str] = None
    journal: Optional[str] = None
    year: Optional[int] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    pdf_url: Optional[str] = None
    pdf_key: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[StrList] = None
    citations: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None


class BackgroundCreate(RpcInput):
    title: Optional[str] = None
    image_url: str
    image_key: Optional[str] = None
    active: Optional[bool] = None
    sort_order: Optional[int] = None


class BackgroundUpdate(RpcInput):
    id: int
    title: Optional[str] = None
    image_url: Optional[str] = None
    image_key: Optional[str] = None
    active: Optional[bool] = None
    sort_order: Optional[int] = None


class SearchInput(RpcInput):
    q: str
    type: Optional[Literal["photos", "essays", "papers"]] = None


class ImageUploadInput(RpcInput):
    filename: str = Field(min_length=1)
    content_type: str
    base64_data: str


class PdfUploadInput(RpcInput):
    filename: str = Field(min_length=1)
    base64_data: str
    content_type: Optional[str] = None


class SettingKeyInput(RpcInput):
    key: str = Field(min_length=1, max_length=100)


class SettingSetInput(SettingKeyInput):
    value: str


class LoginInput(BaseModel):
    email: str = Field(min_length=3)
    password: str

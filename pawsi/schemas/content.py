from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pawsi.models.enums import ContentKind, ContentStatus


class ListingCreateBase(BaseModel):
    model_config = ConfigDict(extra='forbid')

    description: Optional[str] = None
    images: list[str] = Field(default_factory=list, max_length=10)
    location_text: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    country: Optional[str] = None
    province: Optional[str] = None


class PostCreateBase(ListingCreateBase):
    title: str = Field(min_length=1, max_length=200)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_whatsapp: Optional[str] = None


class AnimalPostCreateBase(PostCreateBase):
    species: Optional[str] = None
    breed: Optional[str] = None
    colors: list[str] = Field(default_factory=list)


class LostPostCreate(AnimalPostCreateBase):
    sex: Optional[str] = None
    lost_at: Optional[datetime] = None


class FoundPostCreate(AnimalPostCreateBase):
    state: Optional[str] = None
    seen_at: Optional[datetime] = None


class AdoptionPostCreate(AnimalPostCreateBase):
    age: Optional[str] = None


class ClassifiedAdCreate(PostCreateBase):
    category: str = Field(min_length=1)
    condition: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    store_contact: Optional[str] = None


class VeterinarianCreate(ListingCreateBase):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp: Optional[str] = None
    website: Optional[str] = None
    services: list[str] = Field(default_factory=list)


class ContentSnapshot(BaseModel):
    kind: ContentKind
    id: str
    owner_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: ContentStatus
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None


class ListingOut(ContentSnapshot):
    data: dict[str, Any] = Field(default_factory=dict)


class ListingCreated(BaseModel):
    listing: ListingOut
    # Shown once; only its hash is stored.
    owner_secret: Optional[str] = None


class ResolveBySecretRequest(BaseModel):
    secret: str = Field(min_length=1, max_length=32)
    status: ContentStatus = ContentStatus.RESOLVED


class ResolveBySecretResponse(BaseModel):
    ok: bool


class OwnerStatusUpdate(BaseModel):
    status: ContentStatus


class RenewalOut(BaseModel):
    kind: ContentKind
    id: str
    renewed_until: Optional[datetime] = None
    refreshed_at: datetime

"""Listing tables. Each content kind keeps its own table; the lifecycle columns
come from the shared mixins so the content store can treat them uniformly."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from pawsi.models.base import IDModel, TimestampModel, UTCDateTime
from pawsi.models.enums import ContentStatus, enum_type

_content_status = enum_type(ContentStatus, 'content_status')


class ListingBase(IDModel, TimestampModel, SQLModel):
    user_id: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = Field(default=None, sa_type=sa.Text)
    status: ContentStatus = Field(
        default=ContentStatus.ACTIVE,
        sa_type=_content_status,
        sa_column_kwargs={"nullable": False},
        index=True,
    )
    images: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    location_text: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    country: Optional[str] = None
    province: Optional[str] = None


class PostFields(SQLModel):
    title: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_whatsapp: Optional[str] = None


class AnimalFields(SQLModel):
    species: Optional[str] = None
    breed: Optional[str] = None
    colors: list[str] = Field(default_factory=list, sa_type=sa.JSON)


class OwnerSecretFields(SQLModel):
    owner_secret_hash: Optional[str] = None


class ExpiringFields(SQLModel):
    expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime, index=True)


class LostPost(ListingBase, PostFields, AnimalFields, OwnerSecretFields, ExpiringFields, table=True):
    __tablename__ = 'lost_posts'

    sex: Optional[str] = None
    lost_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class FoundPost(ListingBase, PostFields, AnimalFields, OwnerSecretFields, ExpiringFields, table=True):
    __tablename__ = 'reported_posts'

    state: Optional[str] = None
    seen_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class AdoptionPost(ListingBase, PostFields, AnimalFields, OwnerSecretFields, table=True):
    __tablename__ = 'adoption_posts'

    age: Optional[str] = None


class ClassifiedAd(ListingBase, PostFields, table=True):
    __tablename__ = 'classifieds'

    category: str
    condition: Optional[str] = None
    price: Optional[float] = None
    store_contact: Optional[str] = None


class VeterinarianListing(ListingBase, table=True):
    __tablename__ = 'veterinarians'

    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp: Optional[str] = None
    website: Optional[str] = None
    services: list[str] = Field(default_factory=list, sa_type=sa.JSON)

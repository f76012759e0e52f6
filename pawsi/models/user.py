from typing import Optional
from sqlmodel import Field, SQLModel
from pawsi.models.base import IDModel, TimestampModel


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    email: str = Field(index=True, unique=True)
    hashed_password: str
    display_name: Optional[str] = None
    is_active: bool = True

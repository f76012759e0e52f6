from typing import Optional

from sqlmodel import Session, select

from pawsi.models.user import User
from pawsi.schemas.user import UserOut, UserUpdate

DEFAULT_DISPLAY_NAME = 'Usuario'


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        is_active=user.is_active,
    )


def get_user(session: Session, user_id: str) -> Optional[User]:
    return session.exec(select(User).where(User.id == user_id)).first()


def resolve_email(session: Session, user_id: Optional[str]) -> Optional[str]:
    if not user_id:
        return None
    user = get_user(session, user_id)
    if not user or not user.is_active:
        return None
    return user.email


def display_name_for(session: Session, user_id: str) -> str:
    user = get_user(session, user_id)
    if user and user.display_name:
        return user.display_name
    return DEFAULT_DISPLAY_NAME


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.get('email')
    if email is not None and email != user.email:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing and existing.id != user.id:
            raise ValueError('Email already registered')
        user.email = email
    if 'display_name' in data:
        user.display_name = data['display_name']

    session.add(user)
    session.commit()
    session.refresh(user)
    return user

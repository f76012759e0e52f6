from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from pawsi.core.config import settings
from pawsi.db.session import get_session

router = APIRouter()


@router.get('/health')
def health(session: Session = Depends(get_session)) -> dict:
    try:
        session.connection().execute(text('SELECT 1'))
        database = 'ok'
    except SQLAlchemyError:
        database = 'unavailable'
    return {'status': 'ok', 'env': settings.ENV, 'database': database}

import random

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.core.database import get_db
from pocketguard.models.user import User

_quiz_rng = random.Random()


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    user_id = request.session.get("user_id")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = await db.get(User, user_id)
    if user is None:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_rng() -> random.Random:
    """Source of quiz shuffling; tests override it with a seeded instance."""
    return _quiz_rng

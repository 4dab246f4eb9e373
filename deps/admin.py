# deps/admin.py
from fastapi import Depends, HTTPException, status

from app.store.base import RecordStore
from deps.auth import get_current_user, CurrentUser
from deps.store import get_store


def require_admin(
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> CurrentUser:
    if not store.is_admin(user.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="ADMIN_REQUIRED",
        )
    return user

# deps/artist.py
from uuid import UUID

from fastapi import Depends, HTTPException

from app.store.base import RecordStore
from deps.auth import get_current_user, CurrentUser
from deps.store import get_store


def require_artist_access(
    artist_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> CurrentUser:
    # admins can look at any artist
    if store.user_has_artist_access(user.user_id, artist_id) or store.is_admin(user.user_id):
        return user

    raise HTTPException(status_code=403, detail="ARTIST_NOT_OWNED")

"""Vote document model (`votes`). At most one per (post_id, user_id), backed by a unique index."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class VoteDoc(MongoBaseModel):
    post_id: PyObjectId
    option_id: PyObjectId
    user_id: PyObjectId
    created_at: Optional[datetime] = None

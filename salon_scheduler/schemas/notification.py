from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class Notification(BaseModel):
    id: str
    title: str
    message: str
    type: Literal["info", "success", "warning"] = "info"
    client_account_id: Optional[str] = None
    read: bool = False
    created_at: datetime

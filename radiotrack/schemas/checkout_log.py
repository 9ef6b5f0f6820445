import enum
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class CheckoutOperation(str, enum.Enum):
    check_out = "check-out"
    check_in = "check-in"


class CheckoutLogEntry(BaseModel):
    """Append-only; entries are never modified after they are written."""

    radio_id: str = Field(alias="radioID")
    user_id: str = Field(alias="userID")
    operation: CheckoutOperation
    date: datetime

    model_config = ConfigDict(populate_by_name=True)


class CheckoutLogCreate(BaseModel):
    # Presence is validated in the service so that missing fields are a 400
    radio_id: str | None = Field(None, alias="radioID")
    user_id: str | None = Field(None, alias="userID")
    operation: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ArchiveInfo(BaseModel):
    name: str
    entries: int

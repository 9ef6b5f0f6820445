import enum
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class Radio(BaseModel):
    radio_id: str = Field(alias="ID")
    name: str = Field(alias="Name")
    comments: str = Field("", alias="Comments")
    partially_damaged: bool = Field(False, alias="PartiallyDamaged")
    nonfunctional: bool = Field(False, alias="Nonfunctional")
    checked_out_user: str | None = None
    checkout_date: datetime | None = None

    model_config = ConfigDict(populate_by_name=True)


class RadioCreate(BaseModel):
    radio_id: str | None = Field(None, alias="ID", max_length=64)
    name: str | None = Field(None, alias="Name", max_length=255)

    model_config = ConfigDict(populate_by_name=True)


class RadioUpsert(BaseModel):
    """Partial radio update; only fields present in the payload are applied.

    An explicit `"checked_out_user": null` is a check-in, an absent key leaves
    the checkout state alone.
    """

    radio_id: str | None = Field(None, alias="ID", max_length=64)
    name: str | None = Field(None, alias="Name", max_length=255)
    comments: str | None = Field(None, alias="Comments")
    partially_damaged: bool | None = Field(None, alias="PartiallyDamaged")
    nonfunctional: bool | None = Field(None, alias="Nonfunctional")
    checked_out_user: str | None = None
    checkout_date: datetime | None = None

    model_config = ConfigDict(populate_by_name=True)


class CheckoutRequest(BaseModel):
    user_id: str = Field(..., alias="userID", min_length=1)
    force: bool = False  # hand over a radio that is already checked out

    model_config = ConfigDict(populate_by_name=True)


class CommentKind(str, enum.Enum):
    damage = "damage"
    nonfunctional = "nonfunctional"


class CommentRequest(BaseModel):
    author: str = Field(..., min_length=1, max_length=255)
    comment: str = Field(..., min_length=1, max_length=2000)
    kind: CommentKind | None = None

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    id: str
    name: str
    profile_photo: str = Field("", alias="profilePhoto")  # relative URL or ""
    last_updated: datetime = Field(alias="lastUpdated")

    model_config = ConfigDict(populate_by_name=True)


class UserCreate(BaseModel):
    name: str | None = Field(None, max_length=255)
    profile_photo: str | None = Field(None, alias="profilePhoto")  # base64 image data

    model_config = ConfigDict(populate_by_name=True)


class UserUpdate(BaseModel):
    name: str | None = Field(None, max_length=255)
    profile_photo: str | None = Field(None, alias="profilePhoto")

    model_config = ConfigDict(populate_by_name=True)


class UserMutationResponse(BaseModel):
    message: str
    user: User
    # Non-empty when a best-effort photo operation failed
    warnings: list[str] = []

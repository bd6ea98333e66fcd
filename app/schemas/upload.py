from datetime import datetime, timedelta
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_UPLOAD_SIZE = 1 * 1024 * 1024  # 1 MiB


class UploadUrlRequest(BaseModel):
    # A missing or null field falls through to the range check as 0.
    content_length: int = Field(default=0, strict=True)

    @field_validator("content_length", mode="before")
    @classmethod
    def null_as_zero(cls, value):
        return 0 if value is None else value


class SigningParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    ttl: timedelta
    content_length: int
    bucket: str
    content_type: str


class UploadUrlResponse(BaseModel):
    method: str
    pre_assigned_url: str
    expiration_time: datetime
    file_name: str
    host: str
    details: List[str]
    object_url: str

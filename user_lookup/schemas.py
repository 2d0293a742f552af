from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uid: str
    birthday: datetime
    sex: str
    name: str


class InfoQuery(BaseModel):
    """Filters accepted by the lookup endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    uid: Optional[str] = None
    upper_date: Optional[str] = Field(None, alias="upperDate")
    lower_date: Optional[str] = Field(None, alias="lowerDate")
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class SearchQuery(BaseModel):
    name: str


class HealthResponse(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str

"""Authentication schema objects."""

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginInput(BaseModel):
    """Validated login payload."""

    username: str = Field(min_length=4, max_length=50)
    password: str = Field(min_length=1, max_length=128)

    model_config = ConfigDict(str_strip_whitespace=True)


class AdminRead(BaseModel):
    """Authenticated admin as returned to the client."""

    username: str

    model_config = ConfigDict(from_attributes=True)

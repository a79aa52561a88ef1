from pydantic import BaseModel, ConfigDict, Field


class UserContext(BaseModel):
    """The signed-in user, handed explicitly to every service call."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.permissions import Role


class RoleClaimsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    role: Role = Field(examples=["officer"])


class RoleClaimsResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    message: str
    user_id: str
    role: Role
    access_token: str
    token_type: str = "bearer"

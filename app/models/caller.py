from dataclasses import dataclass

from app.core.permissions import Role


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    id: str
    role: Role

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class PrincipalKind(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """
    An authenticated identity: which table it lives in and its primary key.

    Token claims keep the wire shape {"id": ..., "isAdmin": ...}.
    """
    kind: PrincipalKind
    id: int | None

    @property
    def is_admin(self) -> bool:
        return self.kind is PrincipalKind.ADMIN

    @classmethod
    def user(cls, user_id: int | None) -> "Principal":
        return cls(PrincipalKind.USER, user_id)

    @classmethod
    def admin(cls, admin_id: int | None) -> "Principal":
        return cls(PrincipalKind.ADMIN, admin_id)

    @classmethod
    def from_flag(cls, principal_id: int | None, is_admin: bool) -> "Principal":
        return cls.admin(principal_id) if is_admin else cls.user(principal_id)

    def to_claims(self) -> dict:
        return {"id": self.id, "isAdmin": self.is_admin}

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        principal_id = claims.get("id")
        if principal_id is None:
            raise ValueError("Token claims do not contain an id")
        return cls.from_flag(int(principal_id), bool(claims.get("isAdmin", False)))

# tgverify/models.py
import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel


class MembershipStatus(str, enum.Enum):
    CREATOR = "creator"
    ADMINISTRATOR = "administrator"
    MEMBER = "member"
    RESTRICTED = "restricted"
    LEFT = "left"
    KICKED = "kicked"

    @property
    def is_member(self) -> bool:
        return self not in (MembershipStatus.LEFT, MembershipStatus.KICKED)

    @classmethod
    def parse(cls, raw: Any) -> "MembershipStatus":
        if isinstance(raw, cls):
            return raw
        # telegram's ChatMemberStatus is a str enum whose str() is the raw value
        return cls(str(raw))


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(user_id=user.id, username=user.username, first_name=user.first_name)

    @property
    def display_name(self) -> Optional[str]:
        return self.username or self.first_name


class MembershipRecord(BaseModel):
    """Snapshot of one user's status in one group, as Telegram reported it."""

    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    status: MembershipStatus

    @classmethod
    def from_chat_member(cls, cm) -> "MembershipRecord":
        identity = Identity.from_user(cm.user)
        return cls(
            user_id=identity.user_id,
            username=identity.username,
            first_name=identity.first_name,
            status=MembershipStatus.parse(cm.status),
        )

    @property
    def identity(self) -> Identity:
        return Identity(self.user_id, self.username, self.first_name)

    @property
    def is_member(self) -> bool:
        return self.status.is_member

    def to_json(self) -> Dict[str, Any]:
        return {
            "exists": True,
            "userId": self.user_id,
            "username": self.username,
            "status": self.status.value,
        }

from __future__ import annotations

from dataclasses import dataclass

from updoo.models.enums import Language, Role


@dataclass(frozen=True)
class Caller:
    """Who is asking. ``user_id is None`` means anonymous."""

    user_id: int | None = None
    role: Role | None = None
    language: Language | None = None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()

    @classmethod
    def for_user(cls, user) -> "Caller":
        return cls(user_id=user.id, role=Role(user.role), language=Language(user.language))

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, listing) -> bool:
        return self.user_id is not None and listing.author_id == self.user_id

    def can_manage(self, listing) -> bool:
        return self.is_admin or self.owns(listing)

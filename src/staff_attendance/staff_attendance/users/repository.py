from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StaffProfile, User


class UserRepository(Protocol):
    """Repository interface for users and staff profiles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_profile(self, user_id: int) -> Optional[StaffProfile]:
        raise NotImplementedError

    def list_staff(self) -> Sequence[StaffProfile]:
        raise NotImplementedError

    def create_staff(self, *, email: str, password_hash: str, profile: StaffProfile) -> int:
        """Insert a STAFF user and its profile together; returns the new user id."""
        raise NotImplementedError

    def update_user(self, user_id: int, *, email: Optional[str] = None, password_hash: Optional[str] = None) -> None:
        raise NotImplementedError

    def update_profile(self, profile: StaffProfile) -> None:
        raise NotImplementedError

    def delete_user(self, user_id: int) -> bool:
        raise NotImplementedError

from sqlmodel import Session, select

from .entity import Profile, ProfileUpdate
from .table import ProfileTable


class ProfileRepository:
    """Data-access layer for profiles."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, profile: Profile) -> Profile:
        row = ProfileTable.model_validate(profile, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return Profile.model_validate(row, from_attributes=True)

    def get(self, profile_id: str) -> Profile | None:
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            return None
        return Profile.model_validate(row, from_attributes=True)

    def get_many(self, profile_ids: list[str]) -> dict[str, Profile]:
        if not profile_ids:
            return {}
        statement = select(ProfileTable).where(ProfileTable.id.in_(profile_ids))
        return {
            row.id: Profile.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def list_by_type(self, user_type: str) -> list[Profile]:
        statement = (
            select(ProfileTable)
            .where(ProfileTable.user_type == user_type)
            .order_by(ProfileTable.full_name)
        )
        return [
            Profile.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def update(self, profile_id: str, changes: ProfileUpdate) -> Profile:
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            raise ValueError(f"Profile {profile_id} not found")
        for field_name, value in changes.model_dump(exclude_unset=True).items():
            setattr(row, field_name, value)
        self._session.add(row)
        self._session.flush()
        return Profile.model_validate(row, from_attributes=True)

    def set_avatar(self, profile_id: str, avatar_url: str | None) -> Profile:
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            raise ValueError(f"Profile {profile_id} not found")
        row.avatar_url = avatar_url
        self._session.add(row)
        self._session.flush()
        return Profile.model_validate(row, from_attributes=True)

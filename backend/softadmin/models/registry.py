from pydantic import BaseModel, Field

from softadmin.models.software import SoftwareEntry
from softadmin.models.user import ADMIN, User

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "123456"


class RegistryDocument(BaseModel):
    """The unit of persistence: every user and every software entry."""

    users: list[User] = Field(default_factory=list)
    softwares: list[SoftwareEntry] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "RegistryDocument":
        return cls(
            users=[
                User(
                    username=DEFAULT_ADMIN_USERNAME,
                    password=DEFAULT_ADMIN_PASSWORD,
                    role=ADMIN,
                )
            ]
        )

    def find_user(self, username: str) -> User | None:
        return next((u for u in self.users if u.username == username), None)

    def find_software(self, software_id: int) -> SoftwareEntry | None:
        return next((s for s in self.softwares if s.id == software_id), None)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)

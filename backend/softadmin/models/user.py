from pydantic import BaseModel, field_validator

ADMIN = "admin"
USER = "user"


class User(BaseModel):
    username: str
    password: str  # stored and compared in cleartext
    role: str = USER  # "admin" | "user"

    @field_validator("role", mode="before")
    @classmethod
    def _default_role(cls, value):
        return value or USER

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

from dataclasses import dataclass

from softadmin.models.user import ADMIN


@dataclass(frozen=True)
class Identity:
    username: str
    role: str
    login_time: int  # epoch millis

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

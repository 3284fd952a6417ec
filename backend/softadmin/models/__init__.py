from softadmin.models.registry import RegistryDocument
from softadmin.models.session import Identity
from softadmin.models.software import SoftwareEntry
from softadmin.models.user import User

__all__ = [
    "Identity",
    "RegistryDocument",
    "SoftwareEntry",
    "User",
]

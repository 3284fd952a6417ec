from pydantic import BaseModel, ConfigDict, Field, field_validator


class SoftwareEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    version: str
    author: str = Field(default="")
    desc: str = Field(default="")
    filename: str = Field(default="")
    filepath: str = Field(default="")
    create_time: str = Field(default="", alias="createTime")
    enabled: bool = Field(default=False)

    @field_validator("enabled", mode="before")
    @classmethod
    def _truthy_enabled(cls, value):
        # Older documents may hold null or non-boolean flags.
        return bool(value)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)

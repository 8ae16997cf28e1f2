"""Member domain model."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from weekboard.core.config import settings


class Member(BaseModel):
    """Team member data transfer object. The email is the canonical identifier."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., description="Member email, used as the member ID")
    name: str = Field(default="", description="Display name")
    avatar_url: str = Field(default="", alias="avatarUrl", description="Avatar image URL")
    max_points: int = Field(
        default_factory=lambda: settings.default_capacity,
        alias="maxPoints",
        description="Weekly capacity budget in points",
    )
    created_at: int | None = Field(default=None, alias="createdAt", description="Registration time (epoch ms)")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        """Member ID as referenced by tasks."""
        return self.email

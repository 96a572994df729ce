"""Identity handed over by the external identity provider."""

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Authenticated user as seen by this service."""

    user_id: str
    first_name: str | None = None
    email_addresses: list[str] = Field(default_factory=list)

    @property
    def primary_email(self) -> str | None:
        return self.email_addresses[0] if self.email_addresses else None

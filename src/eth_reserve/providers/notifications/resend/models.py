"""Payload for the Resend email API."""
from pydantic import BaseModel, Field


class ResendEmail(BaseModel):
    sender: str = Field(serialization_alias="from")
    to: list[str]
    subject: str
    html: str

    model_config = {"populate_by_name": True}

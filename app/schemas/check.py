"""
app/schemas/check.py

Request schema for the streaming index check endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    urls: list[str] = Field(default_factory=list)
    economy_mode: bool = Field(default=False, alias="economyMode")

    def cleaned_urls(self) -> list[str]:
        return [url.strip() for url in self.urls if url and url.strip()]


class SecurityTokenResponse(BaseModel):
    token: str

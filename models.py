"""Response models shared by the scraper, the API and the CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """One listing as rendered on the results page.

    ``price`` is kept as displayed (e.g. ``"₹1,299"``); nothing downstream
    needs it as a number.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    price: str = Field(min_length=1)


class ScrapeResult(BaseModel):
    headphones: list[Product] = Field(default_factory=list)
    earbuds: list[Product] = Field(default_factory=list)

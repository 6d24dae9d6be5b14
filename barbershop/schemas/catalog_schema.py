"""Barber and service catalog models."""

from pydantic import BaseModel, ConfigDict
from typing import Optional

from barbershop.utils import format_price


class TeamMember(BaseModel):
    """A barber who can perform services."""
    id: int
    square_up_id: str
    first_name: str
    last_name: str
    status: str
    email_address: Optional[str] = None
    is_owner: Optional[bool] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status.upper() == "ACTIVE"


class Service(BaseModel):
    """A bookable offering of one barber, mirrored from the Square catalog."""
    model_config = ConfigDict(frozen=True)

    id: int
    team_member_id: int
    name: str
    description: str = ""
    price_amount: int
    price_currency: str
    duration: int
    service_variation_id: str
    square_catalog_id: str
    variation_name: Optional[str] = None
    is_available: Optional[bool] = None

    @property
    def formatted_price(self) -> str:
        return format_price(self.price_amount, self.price_currency)

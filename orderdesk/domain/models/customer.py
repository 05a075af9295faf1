"""
Customer and shipping address domain models.

Customers and their addresses are owned by the customer directory; the
order engine only references them.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Iterable


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif value:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    else:
        parsed = datetime.min
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class CustomerDomain:
    """
    Domain model representing a customer.

    Attributes:
        id: Customer ID
        name: Display name
        customer_code: Short customer code used in search
        contact_person: Main contact
        phone: Contact phone number
        email: Contact email address
    """

    id: str
    name: str
    customer_code: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""

    def __post_init__(self) -> None:
        """Validate customer data after initialization."""
        if not self.id:
            raise ValueError("Customer ID is required")

    @property
    def display_name(self) -> str:
        """Get customer's display name for UI purposes."""
        if self.customer_code:
            return f"{self.name} ({self.customer_code})"
        return self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "customer_code": self.customer_code,
            "contact_person": self.contact_person,
            "phone": self.phone,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomerDomain":
        """Create customer from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            customer_code=data.get("customer_code") or "",
            contact_person=data.get("contact_person") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
        )


@dataclass(frozen=True)
class ShippingAddressDomain:
    """
    A delivery address belonging to a customer.

    The creation timestamp picks the default branch of a new order: the
    earliest created address wins.
    """

    id: str
    customer_id: str
    address_name: str
    created_at: datetime
    address_line1: str = ""
    district: str = ""
    amphoe: str = ""
    province: str = ""
    postal_code: str = ""
    contact_name: str = ""
    phone: str = ""
    is_default: bool = False

    @property
    def full_address(self) -> str:
        parts = [self.address_line1, self.district, self.amphoe, self.province, self.postal_code]
        return " ".join(part for part in parts if part)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingAddressDomain":
        """Create shipping address from dictionary."""
        return cls(
            id=str(data["id"]),
            customer_id=str(data.get("customer_id", "")),
            address_name=data.get("address_name") or "",
            created_at=_parse_timestamp(data.get("created_at")),
            address_line1=data.get("address_line1") or "",
            district=data.get("district") or "",
            amphoe=data.get("amphoe") or "",
            province=data.get("province") or "",
            postal_code=data.get("postal_code") or "",
            contact_name=data.get("contact_name") or "",
            phone=data.get("phone") or "",
            is_default=bool(data.get("is_default", False)),
        )

    @staticmethod
    def by_creation(addresses: Iterable["ShippingAddressDomain"]) -> list["ShippingAddressDomain"]:
        """Sort addresses oldest first; ties keep their original order."""
        return sorted(addresses, key=lambda address: address.created_at)

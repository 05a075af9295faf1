"""
Pydantic models for the order store wire format.

Orders travel flattened: one record per ordered variation, each carrying
one or more shipments that say how many units go to which address.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer, field_validator, model_validator

from orderdesk.domain.value_objects.discount import DiscountMode

# Decimals go over the wire as JSON numbers
Amount = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class ShipmentAddressRef(BaseModel):
    """Address summary the store embeds in shipments it returns."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[str] = None
    address_name: Optional[str] = None


class ShipmentRecord(BaseModel):
    """
    One shipment of an order item to one delivery address.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    shipping_address_id: str = Field(..., min_length=1, description="Destination address ID")
    quantity: int = Field(..., ge=1, description="Units shipped to this address")
    shipping_fee: Amount = Field(default=Decimal("0"), ge=0, description="Branch delivery fee")
    delivery_notes: str = Field(default="", description="Note for the driver")
    shipping_address: Optional[ShipmentAddressRef] = Field(None, description="Embedded address (read only)")

    @field_validator("shipping_fee", mode="before")
    @classmethod
    def default_missing_fee(cls, v):
        """Missing or null fees are stored as zero."""
        return Decimal("0") if v is None else v

    @field_validator("delivery_notes", mode="before")
    @classmethod
    def default_missing_notes(cls, v):
        return v or ""


class _ItemIdentity(BaseModel):
    """Product identity fields copied onto every order item."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    variation_id: str = Field(..., min_length=1)
    product_id: Optional[str] = None
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    bottle_size: Optional[str] = None
    quantity: int = Field(..., ge=1)
    unit_price: Amount = Field(..., ge=0)
    shipments: list[ShipmentRecord] = Field(default_factory=list)


class OrderItemWrite(_ItemIdentity):
    """
    Order item as submitted to the store.
    """

    discount_value: Amount = Field(default=Decimal("0"), ge=0)
    discount_mode: DiscountMode = DiscountMode.PERCENT

    @field_validator("discount_mode", mode="before")
    @classmethod
    def parse_discount_mode(cls, v):
        return DiscountMode.parse(v)

    @model_validator(mode="after")
    def validate_shipments(self) -> "OrderItemWrite":
        """Every item ships somewhere, and shipped units add up to the item quantity."""
        if not self.shipments:
            raise ValueError(f"Item {self.variation_id} has no shipments")

        shipped = sum(shipment.quantity for shipment in self.shipments)
        if shipped != self.quantity:
            raise ValueError(
                f"Total shipment quantity ({shipped}) does not match item quantity ({self.quantity})"
            )

        if self.discount_mode is DiscountMode.PERCENT and self.discount_value > 100:
            raise ValueError(f"Percent discount cannot exceed 100: {self.discount_value}")
        return self


class OrderWritePayload(BaseModel):
    """
    Order submitted to the store (create, or update when ``id`` is set).
    """

    id: Optional[str] = Field(None, description="Existing order ID when updating")
    customer_id: str = Field(..., min_length=1)
    delivery_date: Optional[date] = None
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    order_discount_amount: Amount = Field(default=Decimal("0"), ge=0)
    order_discount_mode: DiscountMode = DiscountMode.AMOUNT
    items: list[OrderItemWrite] = Field(..., min_length=1)

    @field_validator("order_discount_mode", mode="before")
    @classmethod
    def parse_order_discount_mode(cls, v):
        """Missing order discount type means amount."""
        return DiscountMode.parse(v, default=DiscountMode.AMOUNT)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready body for the store, without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class OrderItemRead(_ItemIdentity):
    """
    Order item as returned by the store.

    The store keeps the discount in three columns: a type plus separate
    amount and percent values.
    """

    discount_type: Optional[str] = None
    discount_amount: Optional[Amount] = None
    discount_percent: Optional[Amount] = None

    @property
    def discount_mode(self) -> DiscountMode:
        return DiscountMode.parse(self.discount_type)

    @property
    def discount_value(self) -> Decimal:
        """The value matching ``discount_mode``; missing columns count as zero."""
        if self.discount_mode is DiscountMode.AMOUNT:
            return self.discount_amount or Decimal("0")
        return self.discount_percent or Decimal("0")

    @classmethod
    def from_write(cls, item: OrderItemWrite) -> "OrderItemRead":
        """Shape a submitted item the way the store returns it."""
        subtotal = item.unit_price * item.quantity
        if item.discount_mode is DiscountMode.AMOUNT:
            amount, percent = item.discount_value, Decimal("0")
        else:
            amount, percent = subtotal * item.discount_value / 100, item.discount_value
        return cls(
            **item.model_dump(exclude={"discount_value", "discount_mode"}),
            discount_type=item.discount_mode.value,
            discount_amount=amount,
            discount_percent=percent,
        )


class OrderRead(BaseModel):
    """
    Persisted order as returned by the store.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    order_number: Optional[str] = None
    customer_id: Optional[str] = None
    customer: Optional[dict[str, Any]] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    order_discount_amount: Amount = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("order_discount_amount", "discount_amount"),
    )
    order_discount_mode: DiscountMode = Field(
        default=DiscountMode.AMOUNT,
        validation_alias=AliasChoices("order_discount_mode", "order_discount_type"),
    )
    order_status: str = "new"
    payment_status: str = "pending"
    created_at: Optional[datetime] = None
    items: list[OrderItemRead] = Field(default_factory=list)

    @field_validator("order_discount_mode", mode="before")
    @classmethod
    def parse_order_discount_mode(cls, v):
        """Orders stored before the type column existed discount an amount."""
        return DiscountMode.parse(v, default=DiscountMode.AMOUNT)

    @field_validator("order_discount_amount", mode="before")
    @classmethod
    def default_missing_discount(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("payment_status", mode="before")
    @classmethod
    def default_missing_payment_status(cls, v):
        """Orders created before payment tracking have no payment status."""
        return v or "pending"

    @field_validator("delivery_date", mode="before")
    @classmethod
    def parse_delivery_date(cls, v):
        """Accept full timestamps as well as plain dates."""
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v or None

    @classmethod
    def from_write(
        cls,
        payload: OrderWritePayload,
        order_id: str,
        order_number: Optional[str] = None,
        order_status: str = "new",
        payment_status: str = "pending",
    ) -> "OrderRead":
        """Shape a submitted payload the way the store returns it."""
        return cls(
            id=order_id,
            order_number=order_number,
            customer_id=payload.customer_id,
            delivery_date=payload.delivery_date,
            notes=payload.notes,
            internal_notes=payload.internal_notes,
            order_discount_amount=payload.order_discount_amount,
            order_discount_mode=payload.order_discount_mode,
            order_status=order_status,
            payment_status=payment_status,
            items=[OrderItemRead.from_write(item) for item in payload.items],
        )


class OrderSummary(BaseModel):
    """Row of an order listing, enough to fetch the full order."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    order_number: Optional[str] = None
    customer_id: Optional[str] = None
    order_status: Optional[str] = None
    created_at: Optional[datetime] = None

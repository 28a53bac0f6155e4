"""Cart models with Decimal-based pricing."""
import json
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, List, Iterator

from storefront.services.money import to_decimal, multiply


@dataclass
class CartLine:
    """One product's presence in the cart."""
    product_id: str
    name: str
    unit_price: Decimal
    image_ref: str = ""
    quantity: int = 1

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)
        self.quantity = int(self.quantity)

    @property
    def line_total(self) -> Decimal:
        """Price for all units of this line."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary for local persistence."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "image_ref": self.image_ref,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create from dictionary."""
        return cls(
            product_id=str(data["product_id"]),
            name=data["name"],
            unit_price=to_decimal(data["unit_price"]),
            image_ref=data.get("image_ref") or "",
            quantity=int(data["quantity"]),
        )

    def to_row(self, user_id: str) -> dict:
        """Convert to a `cart_items` table row."""
        return {
            "user_id": user_id,
            "product_id": self.product_id,
            "product_name": self.name,
            "product_image": self.image_ref or None,
            "quantity": self.quantity,
            "unit_price": float(self.unit_price),
        }

    @classmethod
    def from_row(cls, row: dict) -> "CartLine":
        """Create from a `cart_items` table row."""
        return cls(
            product_id=str(row["product_id"]),
            name=row.get("product_name") or "",
            unit_price=to_decimal(row.get("unit_price")),
            image_ref=row.get("product_image") or "",
            quantity=int(row.get("quantity") or 1),
        )


@dataclass
class CartSnapshot:
    """
    Ordered collection of cart lines.

    Holds at most one line per product_id. Order is insertion order and only
    matters for display.
    """
    lines: List[CartLine] = field(default_factory=list)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)

    def get(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def upsert(self, line: CartLine) -> CartLine:
        """Merge `line` into the snapshot, adding quantities for a known product."""
        existing = self.get(line.product_id)
        if existing:
            existing.quantity += line.quantity
            return existing
        self.lines.append(line)
        return line

    def remove(self, product_id: str) -> bool:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.product_id != product_id]
        return len(self.lines) != before

    def copy(self) -> "CartSnapshot":
        return CartSnapshot(lines=[replace(line) for line in self.lines])

    @property
    def total_items(self) -> int:
        """Total number of units in the cart."""
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> Decimal:
        """Sum of unit price times quantity over all lines."""
        return sum((line.line_total for line in self.lines), Decimal("0"))

    def to_json(self) -> str:
        """Serialize as a versionless JSON array of lines."""
        return json.dumps([line.to_dict() for line in self.lines])

    @classmethod
    def from_json(cls, data: str) -> "CartSnapshot":
        """
        Deserialize from the local persistence format.

        Raises ValueError/KeyError/TypeError on corrupted data; callers decide
        what corrupted means for them.
        """
        raw = json.loads(data)
        if not isinstance(raw, list):
            raise ValueError("cart snapshot must be a JSON array")
        snapshot = cls()
        for item in raw:
            snapshot.upsert(CartLine.from_dict(item))
        return snapshot

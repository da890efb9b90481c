"""Customer cart built up before an order is submitted."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

from .errors import OrderValidationError
from .models import MenuItem


@dataclass
class CartLine:
    menu_item_id: int
    name: str
    price: float
    quantity: int = 1
    selected_option: Optional[str] = None
    options: list[str] = field(default_factory=list)

    def as_order_item(self) -> dict:
        data = asdict(self)
        data.pop("options")
        return data


class Cart:
    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def add(self, menu_item: MenuItem, option: str | None = None, quantity: int = 1) -> CartLine:
        """Add ``quantity`` of a menu item, merging with an identical line."""
        options = list(menu_item.options or [])
        if option is None and options:
            option = options[0]
        if option is not None and option not in options:
            raise OrderValidationError(f"{option} is not available for {menu_item.name}")

        for line in self._lines:
            if line.menu_item_id == menu_item.id and line.selected_option == option:
                line.quantity += quantity
                return line

        line = CartLine(
            menu_item_id=menu_item.id,
            name=menu_item.name,
            price=menu_item.price,
            quantity=quantity,
            selected_option=option,
            options=options,
        )
        self._lines.append(line)
        return line

    def remove(self, index: int) -> None:
        line = self._line_at(index)
        if line.quantity > 1:
            line.quantity -= 1
        else:
            del self._lines[index]

    def change_option(self, index: int, option: str) -> None:
        line = self._line_at(index)
        if option not in line.options:
            raise OrderValidationError(f"{option} is not available for {line.name}")
        line.selected_option = option

    def total(self) -> float:
        return sum(line.price * line.quantity for line in self._lines)

    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def as_order_items(self) -> list[dict]:
        return [line.as_order_item() for line in self._lines]

    def __len__(self) -> int:
        return len(self._lines)

    def _line_at(self, index: int) -> CartLine:
        if not 0 <= index < len(self._lines):
            raise OrderValidationError("No such cart line")
        return self._lines[index]

# storefront/domain/cart.py
from decimal import Decimal
from typing import Callable, List, Protocol, Tuple

from pydantic import BaseModel, Field


class CartProduct(BaseModel):
    """Migawka produktu z chwili dodania do koszyka."""

    id: str
    name: str
    price: Decimal
    image: str = ""
    category: str = ""


class CartLine(BaseModel):
    product: CartProduct
    quantity: int = Field(..., ge=1)
    selected_color: str = ""


class CartStorage(Protocol):
    def load(self) -> List[CartLine]: ...

    def save(self, lines: List[CartLine]) -> None: ...


Listener = Callable[[Tuple[CartLine, ...]], None]


class CartStore:
    """
    Koszyk klienta jako jawny obiekt stanu.
    Jedna linia na pare (product_id, selected_color), ilosci zawsze >= 1.
    Po kazdej zmianie: zapis do storage (jesli jest) i powiadomienie subskrybentow.
    """

    def __init__(self, storage: CartStorage | None = None):
        self._storage = storage
        self._lines: List[CartLine] = list(storage.load()) if storage else []
        self._listeners: List[Listener] = []

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    def _find(self, product_id: str, color: str) -> int | None:
        for idx, line in enumerate(self._lines):
            if line.product.id == product_id and line.selected_color == color:
                return idx
        return None

    def _commit(self) -> None:
        if self._storage is not None:
            self._storage.save(list(self._lines))
        snapshot = self.lines
        for listener in list(self._listeners):
            listener(snapshot)

    #commands
    def add(self, product: CartProduct, color: str = "") -> None:
        idx = self._find(product.id, color)
        if idx is not None:
            line = self._lines[idx]
            self._lines[idx] = line.model_copy(update={"quantity": line.quantity + 1})
        else:
            self._lines.append(CartLine(product=product, quantity=1, selected_color=color))
        self._commit()

    def remove(self, product_id: str, color: str = "") -> None:
        self._lines = [
            line for line in self._lines
            if not (line.product.id == product_id and line.selected_color == color)
        ]
        self._commit()

    def set_quantity(self, product_id: str, color: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id, color)
            return

        idx = self._find(product_id, color)
        if idx is None:
            return
        self._lines[idx] = self._lines[idx].model_copy(update={"quantity": quantity})
        self._commit()

    def clear(self) -> None:
        self._lines = []
        self._commit()

    #query
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total_price(self) -> Decimal:
        return sum((line.product.price * line.quantity for line in self._lines), Decimal("0.00"))

    #obserwatorzy
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


def shipping_for(subtotal: Decimal, free_threshold: Decimal, flat_rate: Decimal) -> Decimal:
    """Darmowa dostawa powyzej progu, pusty koszyk nic nie kosztuje."""
    if subtotal <= 0 or subtotal > free_threshold:
        return Decimal("0.00")
    return flat_rate

import attrs


@attrs.frozen
class PriceBreakdown:
    seats_subtotal: int
    concessions_subtotal: int
    discount: int
    total: int

    @property
    def subtotal(self) -> int:
        return self.seats_subtotal + self.concessions_subtotal

from pydantic import BaseModel

from src.service.cinema_booking.domain.entity.concession_entity import Concession


class ConcessionResponse(BaseModel):
    id: int
    name: str
    price: int
    category: str
    description: str
    is_available: bool

    @classmethod
    def from_entity(cls, item: Concession) -> 'ConcessionResponse':
        return cls(
            id=item.id,
            name=item.name,
            price=item.price,
            category=item.category,
            description=item.description,
            is_available=item.is_available,
        )

from datetime import datetime
from typing import List

from pydantic import BaseModel


class SeatSchema(BaseModel):
    id: str
    row: str
    number: int
    seat_type: str
    state: str


class SeatMapResponse(BaseModel):
    screening_id: int
    movie_title: str
    cinema_name: str
    starts_at: datetime
    standard_seat_price: int
    deluxe_seat_price: int
    seats: List[SeatSchema]

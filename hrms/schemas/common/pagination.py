from typing import Generic, List, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    page_index: int
    page_size: int
    count: int
    data: List[T]

class MessageResponse(BaseModel):
    success: bool = True
    message: str

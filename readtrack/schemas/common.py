from math import ceil
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Entrada acepta snake_case o camelCase; salida siempre camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class Pagination(CamelModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool

def make_pagination(page: int, limit: int, total_count: int) -> Pagination:
    total_pages = ceil(total_count / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total_count=total_count,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )

def dump(model: BaseModel) -> dict:
    return model.model_dump(by_alias=True, mode="json")

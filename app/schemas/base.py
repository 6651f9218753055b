"""
Shared pydantic base for request/response schemas.

The mobile client speaks camelCase; Python code uses snake_case.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ActionResponse(CamelModel):
    """Generic success acknowledgement."""
    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    """Body of every application error response."""
    error: str
    code: str

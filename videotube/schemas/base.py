# ============================================================================
# FILE: videotube/schemas/base.py
# ============================================================================
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire (fullName, coverImage, ...)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

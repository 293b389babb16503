from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
import re

EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')


class NameSchema(BaseModel):
    """Schema para validar solo el nombre"""
    name: str = Field(..., min_length=1)

    @field_validator('name')
    def validate_name(cls, v):
        v = v.strip().strip('*').strip()
        if not v:
            raise PydanticCustomError(
                'name_missing',
                'Please share your name'
            )
        return v


class EmailSchema(BaseModel):
    """Schema para validar solo el email"""
    email: str = Field(..., min_length=3)

    @field_validator('email')
    def validate_email(cls, v):
        v = v.strip().strip('*').strip()
        if not EMAIL_PATTERN.match(v):
            raise PydanticCustomError(
                'email_invalid',
                'The email should look like name@gmail.com'
            )
        return v


class ContactDetails(NameSchema, EmailSchema):
    """Nombre y email completos del usuario."""

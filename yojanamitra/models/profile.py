"""
Pydantic model for applicant profiles
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict

from ..utils.validators import normalize_caste, split_list_value


class Profile(BaseModel):
    """Applicant attributes used for matching; every field may be unknown"""
    name: Optional[str] = Field(None, description="Applicant's name")
    age: Optional[int] = Field(None, ge=0, le=150, description="Applicant's age")
    phone: Optional[str] = Field(None, description="Contact phone number")
    state: Optional[str] = Field(None, description="State of residence")
    income_annual: Optional[float] = Field(None, ge=0, description="Annual household income in rupees")
    caste: Optional[str] = Field(None, description="Caste category (SC/ST/OBC/General/EWS)")
    education: Optional[str] = Field(None, description="Highest education or current course")
    documents: List[str] = Field(default_factory=list, description="Documents the applicant holds")

    @field_validator('caste', mode='before')
    @classmethod
    def validate_caste(cls, v):
        return normalize_caste(v)

    @field_validator('name', 'phone', 'state', 'education', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator('documents', mode='before')
    @classmethod
    def validate_documents(cls, v):
        if v is None:
            return []
        return split_list_value(v)

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Asha",
                "age": 25,
                "state": "Uttar Pradesh",
                "income_annual": 120000,
                "caste": "OBC",
                "education": "Graduate",
                "documents": ["Aadhaar Card", "Income Certificate"]
            }
        }
    )

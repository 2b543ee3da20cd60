"""
Pydantic models for welfare schemes and their eligibility rules
"""
from typing import List, Optional, Union
from pydantic import BaseModel, Field, NonNegativeFloat, NonNegativeInt, field_validator, ConfigDict

from ..utils.validators import parse_json_object, split_list_value


NATIONWIDE = "All"


class SchemeEligibility(BaseModel):
    """Structured eligibility rules of a scheme"""
    income_max: Optional[Union[NonNegativeInt, NonNegativeFloat]] = Field(
        None, description="Maximum annual income in rupees"
    )
    caste: Optional[List[str]] = Field(None, description="Eligible caste categories")
    student: Optional[bool] = Field(None, description="Whether the scheme is for students")
    education: Optional[str] = Field(None, description="Required education keyword")
    msme_required: Optional[bool] = Field(None, description="Whether an MSME registration is required")

    @field_validator('caste', mode='before')
    @classmethod
    def split_caste(cls, v):
        return split_list_value(v)

    model_config = ConfigDict(extra="allow")


class Scheme(BaseModel):
    """Catalog entry for a government welfare scheme"""
    id: str = Field(..., min_length=1, description="Unique scheme identifier")
    title: str = Field(..., min_length=1, description="Scheme title")
    description: str = Field("", description="Short scheme description")
    state: str = Field(NATIONWIDE, description="State the scheme applies to, 'All' for nationwide")
    eligibility: SchemeEligibility = Field(default_factory=SchemeEligibility)
    required_docs: Optional[List[str]] = Field(None, description="Documents needed for application")
    source_url: Optional[str] = Field(None, description="Source of the scheme information")
    official_portal_url: Optional[str] = Field(None, description="Official scheme portal")
    application_url: Optional[str] = Field(None, description="Direct application link")
    last_reviewed: Optional[str] = Field(None, description="Date the entry was last reviewed")

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('eligibility', mode='before')
    @classmethod
    def parse_eligibility(cls, v):
        if v is None:
            return {}
        return parse_json_object(v)

    @field_validator('required_docs', mode='before')
    @classmethod
    def split_required_docs(cls, v):
        return split_list_value(v)

    @field_validator('state', mode='before')
    @classmethod
    def default_state(cls, v):
        if v is None:
            return NATIONWIDE
        return str(v).strip()

    @property
    def is_nationwide(self) -> bool:
        return self.state.lower() == NATIONWIDE.lower()

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "up_post_matric_obc",
                "title": "Post Matric Scholarship for OBC Students",
                "description": "Scholarship for OBC students pursuing post matric studies in Uttar Pradesh.",
                "state": "Uttar Pradesh",
                "eligibility": {
                    "income_max": 200000,
                    "caste": ["OBC"],
                    "student": True
                },
                "required_docs": ["Aadhaar", "Income Certificate", "Caste Certificate"],
                "official_portal_url": "https://scholarship.up.gov.in"
            }
        }
    )


class SchemeSummary(BaseModel):
    """Scheme fields echoed back with match results"""
    id: str
    title: str
    description: str = ""
    state: str = NATIONWIDE
    eligibility: dict = Field(default_factory=dict)
    required_docs: List[str] = Field(default_factory=list)
    source_url: Optional[str] = None
    official_portal_url: Optional[str] = None
    application_url: Optional[str] = None

    @classmethod
    def from_scheme(cls, scheme: Scheme) -> "SchemeSummary":
        return cls(
            id=scheme.id,
            title=scheme.title,
            description=scheme.description,
            state=scheme.state,
            eligibility=scheme.eligibility.model_dump(exclude_none=True),
            required_docs=list(scheme.required_docs or []),
            source_url=scheme.source_url,
            official_portal_url=scheme.official_portal_url,
            application_url=scheme.application_url
        )

"""Persona kinds and their strongly-typed profile blocks.

A member's persona is a closed tagged union discriminated by ``kind``.
Free-text labels are mapped onto a kind once, by enumerated alias or
whole-word match, and every downstream rule dispatches on the kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from src.utils.text import to_snake_case


class PersonaKind(str, Enum):
    """Primary role category of a member."""

    INVESTOR = "investor"
    FOUNDER = "founder"
    OPERATOR = "operator"
    ADVISOR = "advisor"
    OTHER = "other"


_PERSONA_ALIASES: dict[str, PersonaKind] = {
    "investor": PersonaKind.INVESTOR,
    "vc": PersonaKind.INVESTOR,
    "venture_capitalist": PersonaKind.INVESTOR,
    "angel": PersonaKind.INVESTOR,
    "angel_investor": PersonaKind.INVESTOR,
    "general_partner": PersonaKind.INVESTOR,
    "managing_partner": PersonaKind.INVESTOR,
    "founder": PersonaKind.FOUNDER,
    "co_founder": PersonaKind.FOUNDER,
    "cofounder": PersonaKind.FOUNDER,
    "ceo": PersonaKind.FOUNDER,
    "founder_ceo": PersonaKind.FOUNDER,
    "operator": PersonaKind.OPERATOR,
    "talent": PersonaKind.OPERATOR,
    "engineer": PersonaKind.OPERATOR,
    "designer": PersonaKind.OPERATOR,
    "product_manager": PersonaKind.OPERATOR,
    "advisor": PersonaKind.ADVISOR,
    "adviser": PersonaKind.ADVISOR,
    "consultant": PersonaKind.ADVISOR,
    "mentor": PersonaKind.ADVISOR,
    "service_provider": PersonaKind.ADVISOR,
}

# Whole-word fallback, checked in this order when a label names several roles.
_PERSONA_KEYWORDS: tuple[tuple[PersonaKind, frozenset[str]], ...] = (
    (PersonaKind.FOUNDER, frozenset({"founder", "cofounder", "ceo"})),
    (PersonaKind.INVESTOR, frozenset({"investor", "vc", "angel"})),
    (PersonaKind.ADVISOR, frozenset({"advisor", "adviser", "consultant", "mentor"})),
    (
        PersonaKind.OPERATOR,
        frozenset({"operator", "talent", "engineer", "designer", "product"}),
    ),
)


def classify_persona(label: str | None) -> PersonaKind:
    """Map a free-text persona label onto a PersonaKind.

    "Angel Investor" -> INVESTOR, "Co-Founder & CEO" -> FOUNDER,
    "Consulting" -> OTHER (no whole-word match).
    """
    key = to_snake_case(label)
    if not key:
        return PersonaKind.OTHER
    if key in _PERSONA_ALIASES:
        return _PERSONA_ALIASES[key]

    words = set(key.split("_"))
    for kind, keywords in _PERSONA_KEYWORDS:
        if words & keywords:
            return kind
    return PersonaKind.OTHER


class _PersonaBase(BaseModel):
    label: str = Field(default="", description="Self-described persona label")

    @field_validator(
        "sectors",
        "stages",
        "looking_for",
        "expertise",
        "services",
        "client_types",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def empty_lists_for_none(cls, v: Any) -> Any:
        return [] if v is None else v


class InvestorPersona(_PersonaBase):
    """Venture or angel investor."""

    kind: Literal["investor"] = "investor"
    label: str = "Investor"
    thesis: str | None = None
    sectors: list[str] = Field(default_factory=list)
    stages: list[str] = Field(default_factory=list)
    notable_wins: str | None = None
    aum: str | None = Field(default=None, description="Assets under management, e.g. '$150M'")
    check_size_min: str | float | None = Field(
        default=None, description="Minimum check size, numeric or e.g. '250K'"
    )


class FounderPersona(_PersonaBase):
    """Startup founder or CEO."""

    kind: Literal["founder"] = "founder"
    label: str = "Founder"
    company: str | None = None
    problem: str | None = Field(default=None, description="Problem the company solves")
    funding_raised: str | None = Field(default=None, description="e.g. '$2.5M'")
    looking_for: list[str] = Field(default_factory=list)
    stage: str | None = None
    team_size: int | None = Field(default=None, ge=0)


class OperatorPersona(_PersonaBase):
    """Operator, engineer, designer or product talent."""

    kind: Literal["operator"] = "operator"
    label: str = "Operator"
    current_role: str | None = None
    current_company: str | None = None
    expertise: list[str] = Field(default_factory=list)
    ideal_next_role: str | None = None
    open_to_opportunities: bool = False
    years_experience: float | None = Field(default=None, ge=0)


class AdvisorPersona(_PersonaBase):
    """Advisor, consultant or service provider."""

    kind: Literal["advisor"] = "advisor"
    label: str = "Advisor"
    services: list[str] = Field(default_factory=list)
    client_types: list[str] = Field(default_factory=list)


class OtherPersona(_PersonaBase):
    """Any member outside the enumerated personas."""

    kind: Literal["other"] = "other"
    label: str = ""


Persona = Annotated[
    InvestorPersona | FounderPersona | OperatorPersona | AdvisorPersona | OtherPersona,
    Field(discriminator="kind"),
]

_persona_adapter: TypeAdapter[Persona] = TypeAdapter(Persona)


def parse_persona(data: Any) -> Persona:
    """Validate persona data, classifying the label when ``kind`` is absent."""
    if isinstance(data, _PersonaBase):
        return data  # type: ignore[return-value]
    if data is None:
        return OtherPersona()
    if isinstance(data, str):
        data = {"label": data}
    payload = dict(data)
    if not payload.get("kind"):
        payload["kind"] = classify_persona(payload.get("label")).value
    return _persona_adapter.validate_python(payload)

"""Member persona union and label classification."""

from src.personas.models import (
    AdvisorPersona,
    FounderPersona,
    InvestorPersona,
    OperatorPersona,
    OtherPersona,
    Persona,
    PersonaKind,
    classify_persona,
    parse_persona,
)

__all__ = [
    "Persona",
    "PersonaKind",
    "InvestorPersona",
    "FounderPersona",
    "OperatorPersona",
    "AdvisorPersona",
    "OtherPersona",
    "classify_persona",
    "parse_persona",
]

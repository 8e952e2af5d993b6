"""Pairwise compatibility scoring and anonymized previews."""

from src.compatibility.models import AnonymizedPreview, CompatibilityScore, ScoringSubject
from src.compatibility.scorer import anonymize, score_pair

__all__ = [
    "score_pair",
    "anonymize",
    "CompatibilityScore",
    "ScoringSubject",
    "AnonymizedPreview",
]

"""Match-signal generation and storage.

Public API:
    - SignalGenerator: Derive MatchSignals from a MemberProfile
    - SignalRepository: Async SQLite store, one record per user
    - SignalService: Regenerate-and-upsert orchestration
    - MemberProfileLoader: Load member profiles from YAML/JSON
    - parse_money: Parse "$5M"-style amounts into USD
"""

from src.signals.generator import (
    SignalGenerator,
    build_embedding_text,
    build_numeric_features,
    build_tags,
    build_trust_signals,
)
from src.signals.gazetteer import geo_tags, region_tags
from src.signals.models import (
    MatchSignals,
    MemberProfile,
    NumericFeatures,
    TrustSignals,
    VerifiedLink,
)
from src.signals.money import parse_money
from src.signals.profile import MemberProfileLoader
from src.signals.repository import SignalRepository
from src.signals.service import SignalService

__all__ = [
    "SignalGenerator",
    "SignalRepository",
    "SignalService",
    "MemberProfileLoader",
    "MatchSignals",
    "MemberProfile",
    "NumericFeatures",
    "TrustSignals",
    "VerifiedLink",
    "build_embedding_text",
    "build_numeric_features",
    "build_tags",
    "build_trust_signals",
    "geo_tags",
    "region_tags",
    "parse_money",
]

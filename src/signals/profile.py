"""Load member profiles from YAML or JSON files."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import yaml

from src.signals.models import MemberProfile


def _parse_yaml(raw: str, path: Path) -> object:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML member profile: {path}") from e


def _parse_json(raw: str, path: Path) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON member profile: {path}") from e


def _parse_sniffed(raw: str, path: Path) -> object:
    """JSON when the text opens like JSON and parses as such, else YAML."""
    if raw.lstrip()[:1] in ("{", "["):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass
    return _parse_yaml(raw, path)


_PARSERS: dict[str, Callable[[str, Path], object]] = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".json": _parse_json,
}


class MemberProfileLoader:
    """Read ``MemberProfile`` files for the CLI and flag thin profiles."""

    def load(self, path: Path | str) -> MemberProfile:
        """Load a MemberProfile; raises ValidationError on bad content."""
        return MemberProfile.model_validate(self.load_mapping(path))

    def load_mapping(self, path: Path | str) -> dict:
        profile_path = Path(path)
        if not profile_path.is_file():
            raise FileNotFoundError(f"Member profile not found: {profile_path}")

        parse = _PARSERS.get(profile_path.suffix.lower(), _parse_sniffed)
        data = parse(profile_path.read_text(encoding="utf-8"), profile_path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Member profile must be a mapping: {profile_path}")
        return data

    def validate(self, member: MemberProfile) -> list[str]:
        """Warnings for profiles that will produce thin signals."""
        checks = (
            (member.profile.name.value, "Missing display name"),
            (member.goal_statement, "Missing goal statement"),
            (member.profile.geo.value, "Missing location; geo tags will be empty"),
            (
                member.persona.kind != "other",
                "Persona is unclassified; persona rules will not apply",
            ),
        )
        return [warning for present, warning in checks if not present]

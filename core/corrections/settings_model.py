# Path: core/corrections/settings_model.py
# Purpose: Validate and normalize user-supplied correction parameters.
# Layer: core/corrections.
# Details: Single validation boundary; everything downstream works with CorrectionSettings and closed enums.

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from core.errors import InvalidSettingError
from core.models.domain import AngleTag, CorrectionMode, CorrectionScope, CorrectionSettings

E = TypeVar("E", bound=Enum)

DEFAULT_SETTINGS = CorrectionSettings()

STRENGTH_RANGE = (1, 100)
LINE_PRESERVATION_RANGE = (0, 100)

# Legacy records were written with camelCase keys.
_ALIASES = {
    "linePreservation": "line_preservation",
    "angleTag": "angle_tag",
    "absoluteLineFidelity": "absolute_line_fidelity",
}

FIELDS = ("strength", "line_preservation", "mode", "angle_tag", "scope", "absolute_line_fidelity")


def canonical_keys(raw: Mapping[str, Any]) -> dict:
    """Map legacy camelCase keys onto field names, dropping anything unknown."""

    result = {}
    for key, value in raw.items():
        name = _ALIASES.get(key, key)
        if name in FIELDS:
            result[name] = value
    return result


def _clamp_percentage(field: str, value: Any, bounds: tuple) -> int:
    if isinstance(value, bool):
        raise InvalidSettingError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidSettingError(field, value) from exc
    if math.isnan(number):
        raise InvalidSettingError(field, value)
    low, high = bounds
    if math.isinf(number):
        return low if number < 0 else high
    return int(min(max(round(number), low), high))


def _parse_enum(field: str, enum_cls: Type[E], value: Any) -> E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        needle = value.strip().casefold()
        for member in enum_cls:
            if needle in (member.value.casefold(), member.name.casefold()):
                return member
        # "Proportion" / "Conditioned" style short names
        for member in enum_cls:
            if member.value.casefold().split(" (")[0] == needle:
                return member
    raise InvalidSettingError(field, value)


def _parse_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise InvalidSettingError(field, value)


def normalize(raw: Mapping[str, Any], base: Optional[CorrectionSettings] = None) -> CorrectionSettings:
    """Return validated settings built from ``raw``.

    Missing fields are taken from ``base`` (defaults when omitted). Percentages are
    clamped and rounded; unknown enum values raise ``InvalidSettingError`` naming the field.
    """

    fallback = base or DEFAULT_SETTINGS
    values = canonical_keys(raw)

    strength = fallback.strength
    if "strength" in values:
        strength = _clamp_percentage("strength", values["strength"], STRENGTH_RANGE)

    line_preservation = fallback.line_preservation
    if "line_preservation" in values:
        line_preservation = _clamp_percentage(
            "line_preservation", values["line_preservation"], LINE_PRESERVATION_RANGE
        )

    mode = fallback.mode
    if "mode" in values:
        mode = _parse_enum("mode", CorrectionMode, values["mode"])

    angle_tag = fallback.angle_tag
    if "angle_tag" in values:
        angle_tag = _parse_enum("angle_tag", AngleTag, values["angle_tag"])

    scope = fallback.scope
    if "scope" in values:
        scope = _parse_enum("scope", CorrectionScope, values["scope"])

    absolute_line_fidelity = fallback.absolute_line_fidelity
    if "absolute_line_fidelity" in values:
        absolute_line_fidelity = _parse_bool("absolute_line_fidelity", values["absolute_line_fidelity"])

    return CorrectionSettings(
        strength=strength,
        line_preservation=line_preservation,
        mode=mode,
        angle_tag=angle_tag,
        scope=scope,
        absolute_line_fidelity=absolute_line_fidelity,
    )

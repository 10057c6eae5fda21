import pytest

from core.corrections import DEFAULT_SETTINGS, normalize
from core.errors import InvalidSettingError, ValidationError
from core.models.domain import AngleTag, CorrectionMode, CorrectionScope, CorrectionSettings


def test_defaults_when_input_is_empty():
    s = normalize({})
    assert s == DEFAULT_SETTINGS
    assert s.strength == 50
    assert s.line_preservation == 85
    assert s.mode is CorrectionMode.PROPORTION
    assert s.angle_tag is AngleTag.THREE_QUARTER
    assert s.scope is CorrectionScope.FULL_IMAGE
    assert s.absolute_line_fidelity is True


def test_out_of_range_percentages_are_clamped():
    s = normalize({"strength": 150, "line_preservation": -5, "mode": "Conditioned (Mode B)"})
    assert s.strength == 100
    assert s.line_preservation == 0
    assert s.mode is CorrectionMode.CONDITIONED


def test_strength_lower_bound_is_one():
    assert normalize({"strength": 0}).strength == 1


def test_fractional_percentages_become_integers():
    s = normalize({"strength": 42.7, "line_preservation": "60"})
    assert s.strength == 43
    assert s.line_preservation == 60
    assert isinstance(s.strength, int)


def test_unknown_mode_names_the_field():
    with pytest.raises(InvalidSettingError) as exc_info:
        normalize({"mode": "Bogus"})
    assert exc_info.value.field == "mode"
    assert "mode" in str(exc_info.value)


@pytest.mark.parametrize("field", ["angle_tag", "scope"])
def test_unknown_enum_values_are_rejected(field):
    with pytest.raises(InvalidSettingError) as exc_info:
        normalize({field: "Sideways"})
    assert exc_info.value.field == field


def test_invalid_setting_is_a_validation_error():
    with pytest.raises(ValidationError):
        normalize({"scope": "Feet Priority"})


def test_non_numeric_strength_is_rejected():
    with pytest.raises(InvalidSettingError) as exc_info:
        normalize({"strength": "lots"})
    assert exc_info.value.field == "strength"


def test_boolean_strength_is_rejected():
    with pytest.raises(InvalidSettingError):
        normalize({"strength": True})


def test_fidelity_flag_must_be_boolean():
    with pytest.raises(InvalidSettingError) as exc_info:
        normalize({"absolute_line_fidelity": "yes"})
    assert exc_info.value.field == "absolute_line_fidelity"


def test_enum_values_accept_display_value_name_and_short_name():
    assert normalize({"mode": "Proportion"}).mode is CorrectionMode.PROPORTION
    assert normalize({"mode": "conditioned"}).mode is CorrectionMode.CONDITIONED
    assert normalize({"angle_tag": "3/4 view"}).angle_tag is AngleTag.THREE_QUARTER
    assert normalize({"angle_tag": "THREE_QUARTER"}).angle_tag is AngleTag.THREE_QUARTER
    assert normalize({"scope": "Hands Priority"}).scope is CorrectionScope.HANDS_PRIORITY
    assert normalize({"scope": CorrectionScope.FACE_PRIORITY}).scope is CorrectionScope.FACE_PRIORITY


def test_legacy_camel_case_keys_are_understood():
    s = normalize({"linePreservation": 10, "angleTag": "Profile", "absoluteLineFidelity": False})
    assert s.line_preservation == 10
    assert s.angle_tag is AngleTag.PROFILE
    assert s.absolute_line_fidelity is False


def test_partial_update_keeps_base_values():
    base = CorrectionSettings(strength=70, angle_tag=AngleTag.UPSHOT)
    s = normalize({"scope": "Face Priority"}, base=base)
    assert s.strength == 70
    assert s.angle_tag is AngleTag.UPSHOT
    assert s.scope is CorrectionScope.FACE_PRIORITY


def test_normalize_does_not_mutate_input():
    raw = {"strength": 500}
    normalize(raw)
    assert raw == {"strength": 500}


def test_settings_are_immutable():
    s = normalize({})
    with pytest.raises(AttributeError):
        s.strength = 10  # type: ignore[misc]


def test_to_dict_uses_display_values():
    assert normalize({"angle_tag": "Profile"}).to_dict()["angle_tag"] == "Profile"


def test_infinite_percentages_clamp_to_bounds():
    s = normalize({"strength": float("inf"), "line_preservation": "-inf"})
    assert s.strength == 100
    assert s.line_preservation == 0
    assert normalize({"strength": "Infinity"}).strength == 100


def test_oversized_integer_is_invalid():
    with pytest.raises(InvalidSettingError):
        normalize({"strength": 10 ** 400})

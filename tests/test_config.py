"""
Tests for configuration loading.
"""

import pytest

from echowave.config import LifecycleConfig, config_from_dict, load_config
from echowave.errors import ValidationError


def test_defaults():
    config = LifecycleConfig()
    assert config.min_title_length == 3
    assert config.share_base_url == "http://localhost:3000"


def test_load_yaml_overrides(tmp_path):
    path = tmp_path / "echowave.yaml"
    path.write_text("min_title_length: 5\nshare_base_url: https://ew.example\n")
    config = load_config(str(path))
    assert config.min_title_length == 5
    assert config.share_base_url == "https://ew.example"
    assert config.points_per_level == 250


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == LifecycleConfig()


def test_unknown_key_rejected():
    with pytest.raises(ValidationError):
        config_from_dict({"min_title_lenght": 5})


@pytest.mark.parametrize("overrides", [{"min_questions": 1}, {"max_questions": 12}])
def test_question_count_cannot_be_overridden(overrides):
    with pytest.raises(ValidationError):
        config_from_dict(overrides)


def test_question_count_file_override_rejected(tmp_path):
    path = tmp_path / "echowave.yaml"
    path.write_text("max_questions: 12\n")
    with pytest.raises(ValidationError):
        load_config(str(path))


def test_wrong_type_rejected():
    with pytest.raises(ValidationError):
        config_from_dict({"min_title_length": "five"})
    with pytest.raises(ValidationError):
        config_from_dict({"share_base_url": 3000})


@pytest.mark.parametrize("overrides", [{"min_title_length": 0}, {"points_per_level": 0}])
def test_non_positive_limits_rejected(overrides):
    with pytest.raises(ValidationError):
        config_from_dict(overrides)


def test_non_mapping_file(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValidationError):
        load_config(str(path))

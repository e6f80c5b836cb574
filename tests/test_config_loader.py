# tests/test_config_loader.py
"""
Tests for the Pydantic‑based ``services.pipeline.config_loader`` module.

The shipped ``configs/targets.yaml`` is validated as-is; malformed files
are written to ``tmp_path`` so each case gets its own cache key.
"""

import pytest

from core.exceptions import ConfigurationError
from services.pipeline.config_loader import (
    TargetConfig,
    TargetNotFoundError,
    get_target_config,
    list_available_targets,
)


# ----------------------------------------------------------------------
# Every shipped target must validate and point at an absolute page.
# ----------------------------------------------------------------------
def test_all_targets_validate():
    names = list_available_targets()
    assert names, "targets.yaml defines no targets"

    for name in names:
        cfg = get_target_config(name)
        assert isinstance(cfg, TargetConfig)
        assert cfg.source_url.startswith("https://")
        assert cfg.heading.strip(), f"{name} has an empty heading"
        assert 1 <= cfg.limits.max_items <= 8


def test_default_target_matches_published_page():
    cfg = get_target_config("st_george_regional")

    assert cfg.heading == "You might be interested in"
    assert cfg.base_origin == "https://intermountainhealthcare.org"
    assert cfg.output_file == "st-george.json"
    assert cfg.limits.max_items == 8


def test_unknown_target_raises_custom_error():
    unknown_name = "this_target_does_not_exist_12345"
    with pytest.raises(TargetNotFoundError) as exc_info:
        get_target_config(unknown_name)

    # The error message should contain the missing name for easier debugging.
    assert unknown_name in str(exc_info.value)


# ----------------------------------------------------------------------
# Files outside the repo – both the wrapped and bare layouts are accepted.
# ----------------------------------------------------------------------
@pytest.mark.parametrize("wrapped", [True, False])
def test_targets_key_is_optional(tmp_path, wrapped):
    body = (
        "demo:\n"
        "  source_url: https://example.org/page\n"
        "  heading: Related stories\n"
    )
    if wrapped:
        body = "targets:\n" + "".join(f"  {line}\n" for line in body.splitlines())
    path = tmp_path / "targets.yaml"
    path.write_text(body, encoding="utf-8")

    cfg = get_target_config("demo", path)
    assert cfg.heading == "Related stories"
    assert cfg.base_origin == "https://example.org"
    assert cfg.output_file is None


def test_explicit_origin_trailing_slash_is_stripped():
    cfg = TargetConfig(
        source_url="https://example.org/page",
        heading="Related",
        origin="https://cdn.example.org/",
    )
    assert cfg.base_origin == "https://cdn.example.org"


def test_relative_source_url_is_a_configuration_error(tmp_path):
    path = tmp_path / "targets.yaml"
    path.write_text(
        "targets:\n  bad:\n    source_url: /relative\n    heading: Related\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigurationError) as exc_info:
        get_target_config("bad", path)
    assert exc_info.value.details["errors"]


def test_max_items_above_eight_is_rejected(tmp_path):
    path = tmp_path / "targets.yaml"
    path.write_text(
        "targets:\n"
        "  greedy:\n"
        "    source_url: https://example.org/page\n"
        "    heading: Related\n"
        "    limits:\n"
        "      max_items: 20\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigurationError):
        get_target_config("greedy", path)


def test_missing_file_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        list_available_targets(tmp_path / "nope.yaml")


def test_broken_yaml_is_a_configuration_error(tmp_path):
    path = tmp_path / "targets.yaml"
    path.write_text("targets: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        list_available_targets(path)

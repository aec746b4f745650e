"""Tests for run configuration."""

from pathlib import Path

import pytest

from booktally.engine import HarmonizeConfig, HarmonizeResult
from booktally.exceptions import ConfigurationError


@pytest.mark.unit
def test_config_defaults() -> None:
    """Test default thresholds and switches."""
    config = HarmonizeConfig()

    assert (config.h_combined, config.h_title, config.h_author) == (5.0, 3.0, 3.0)
    assert config.remove_duplicates is True
    assert config.disable_clustering is False
    assert config.output_dir == Path("out")
    assert config.clustering.enabled is True


@pytest.mark.unit
def test_config_clustering_view() -> None:
    """Test clustering settings are derived from the run config."""
    config = HarmonizeConfig(h_title=2.0, workers=-1, disable_clustering=True)

    clustering = config.clustering

    assert clustering.h_title == 2.0
    assert clustering.workers == -1
    assert clustering.enabled is False


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [{"h_combined": 0}, {"h_title": -3}, {"h_author": 0}, {"workers": 0}],
)
def test_config_rejects_invalid_parameters(kwargs: dict) -> None:
    """Test invalid parameters fail at construction."""
    with pytest.raises(ConfigurationError):
        HarmonizeConfig(**kwargs)


@pytest.mark.unit
def test_config_rejects_missing_auxiliary_file(tmp_path: Path) -> None:
    """Test override and known-match files must exist."""
    with pytest.raises(ConfigurationError, match="post_overrides file not found"):
        HarmonizeConfig(post_overrides=tmp_path / "missing.tsv")


@pytest.mark.unit
def test_config_to_dict_is_json_safe(tmp_path: Path) -> None:
    """Test paths are stringified in the parameter snapshot."""
    pre = tmp_path / "pre.tsv"
    pre.write_text("a\tb\n", encoding="utf-8")

    data = HarmonizeConfig(pre_overrides=str(pre), output_dir=str(tmp_path)).to_dict()

    assert data["pre_overrides"] == str(pre)
    assert data["post_overrides"] is None
    assert data["output_dir"] == str(tmp_path)
    assert data["h_combined"] == 5.0


@pytest.mark.unit
def test_result_to_dict() -> None:
    """Test the result serializes every counter."""
    result = HarmonizeResult(success=True, total_votes=3, resolved_votes=2, unresolved_votes=1)

    data = result.to_dict()

    assert data["success"] is True
    assert data["resolved_votes"] + data["unresolved_votes"] == data["total_votes"]
    assert data["output_files"] == {}
    assert data["known_matches"] is None

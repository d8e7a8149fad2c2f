"""Unit tests for the preference store."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from cloud_resource_browser.core.config.models import Preferences
from cloud_resource_browser.core.config.preferences import (
    DEFAULT_PROFILE,
    DEFAULT_REGION,
    PreferenceStore,
    effective_profile,
    effective_region,
)


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Return a config path inside a not yet existing directory."""
    return temp_dir / "crb" / "config.yaml"


class TestPreferenceStore:
    """Tests for PreferenceStore."""

    @pytest.mark.unit
    def test_load_missing_file(self, config_path: Path) -> None:
        """A missing file yields empty preferences."""
        assert PreferenceStore(config_path).load() == Preferences()

    @pytest.mark.unit
    def test_save_and_load(self, config_path: Path) -> None:
        """Saved preferences load back in a new store."""
        store = PreferenceStore(config_path)
        assert store.save(Preferences(profile="dev", region="eu-west-1")) is True
        loaded = PreferenceStore(config_path).load()
        assert loaded.profile == "dev"
        assert loaded.region == "eu-west-1"

    @pytest.mark.unit
    def test_setters_update_single_field(self, config_path: Path) -> None:
        """Each setter changes one field and keeps the rest."""
        store = PreferenceStore(config_path)
        store.set_profile("prod")
        store.set_region("ap-northeast-1")
        store.set_last_resource("vpcs")
        assert store.preferences == Preferences(
            profile="prod", region="ap-northeast-1", last_resource="vpcs"
        )
        data = yaml.safe_load(config_path.read_text())
        assert data["preferences"]["last_resource"] == "vpcs"

    @pytest.mark.unit
    def test_save_keeps_other_settings(self, config_path: Path) -> None:
        """Saving preserves settings outside the preferences section."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("page_size: 25\nrefresh_interval: 2.0\n")
        store = PreferenceStore(config_path)
        store.load()
        store.set_profile("dev")
        data = yaml.safe_load(config_path.read_text())
        assert data["page_size"] == 25
        assert data["refresh_interval"] == 2.0
        assert data["preferences"] == {"profile": "dev"}

    @pytest.mark.unit
    def test_invalid_file_falls_back(self, config_path: Path) -> None:
        """An invalid file is ignored on load."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("page_size: [1")
        assert PreferenceStore(config_path).load() == Preferences()

    @pytest.mark.unit
    def test_save_failure_returns_false(self, config_path: Path) -> None:
        """Write failures are reported, not raised."""
        store = PreferenceStore(config_path)
        with patch.object(Path, "write_text", side_effect=OSError("read-only")):
            assert store.save(Preferences(profile="dev")) is False
        assert store.preferences.profile is None


class TestEffectiveValues:
    """Tests for effective_profile and effective_region."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        """Without environment or preferences the defaults apply."""
        assert effective_profile() == DEFAULT_PROFILE
        assert effective_region() == DEFAULT_REGION

    @pytest.mark.unit
    def test_preferences_used(self) -> None:
        """Saved values are used when the environment is silent."""
        prefs = Preferences(profile="dev", region="eu-west-1")
        assert effective_profile(prefs) == "dev"
        assert effective_region(prefs) == "eu-west-1"

    @pytest.mark.unit
    def test_environment_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables take precedence over saved values."""
        monkeypatch.setenv("AWS_PROFILE", "ci")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "us-west-2")
        prefs = Preferences(profile="dev", region="eu-west-1")
        assert effective_profile(prefs) == "ci"
        assert effective_region(prefs) == "us-west-2"

    @pytest.mark.unit
    def test_aws_region_before_default_region(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """AWS_REGION is preferred over AWS_DEFAULT_REGION."""
        monkeypatch.setenv("AWS_REGION", "eu-central-1")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "us-west-2")
        assert effective_region() == "eu-central-1"

from pathlib import Path

import pytest

from settle import ConfigurationError, WaitTiming
from settle.config import _deep_merge, load_config, resolve_timing

pytestmark = [pytest.mark.xdist_group("unit")]


class TestDeepMerge:
    def test_shallow_override(self):
        base = {"a": 1, "b": 2}
        override = {"b": 3}
        assert _deep_merge(base, override) == {"a": 1, "b": 3}

    def test_nested_merge(self):
        base = {"profiles": {"slow": {"timeout": 600, "poll_interval": 30}}}
        override = {"profiles": {"slow": {"timeout": 1200}}}
        result = _deep_merge(base, override)
        assert result == {"profiles": {"slow": {"timeout": 1200, "poll_interval": 30}}}

    def test_override_adds_new_keys(self):
        base = {"profiles": {"a": {"timeout": 1}}}
        override = {"profiles": {"b": {"timeout": 2}}}
        result = _deep_merge(base, override)
        assert result == {"profiles": {"a": {"timeout": 1}, "b": {"timeout": 2}}}

    def test_empty_base(self):
        assert _deep_merge({}, {"a": 1}) == {"a": 1}

    def test_empty_override(self):
        assert _deep_merge({"a": 1}, {}) == {"a": 1}


class TestLoadConfig:
    def test_project_only(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.dev]\ntimeout = 60\n")
        result = load_config(project_dir=tmp_path, global_path=tmp_path / "nonexistent.toml")
        assert result["profiles"]["dev"]["timeout"] == 60

    def test_global_only(self, tmp_path: Path):
        global_toml = tmp_path / "defaults.toml"
        global_toml.write_text("[profiles.kafka]\npoll_interval = 30\n")
        result = load_config(project_dir=tmp_path / "noproject", global_path=global_toml)
        assert result["profiles"]["kafka"]["poll_interval"] == 30

    def test_merge_project_overrides_global(self, tmp_path: Path):
        global_toml = tmp_path / "defaults.toml"
        global_toml.write_text("[profiles.kafka]\ntimeout = 3600\npoll_interval = 30\n")
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / "settle.toml").write_text("[profiles.kafka]\ntimeout = 7200\n")
        result = load_config(project_dir=project_dir, global_path=global_toml)
        assert result["profiles"]["kafka"] == {"timeout": 7200, "poll_interval": 30}

    def test_no_files_returns_empty_profiles(self, tmp_path: Path):
        result = load_config(project_dir=tmp_path / "nope", global_path=tmp_path / "nope.toml")
        assert result == {"profiles": {}}

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.dev\n")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(project_dir=tmp_path, global_path=tmp_path / "nope.toml")


class TestResolveTiming:
    def test_full_profile(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text(
            "[profiles.kafka-cluster]\n"
            "poll_interval = 30\n"
            "timeout = 7200\n"
            "delay = 10\n"
            "backoff = 1.5\n"
            "max_interval = 120\n"
            "not_found_checks = 20\n"
        )
        timing = resolve_timing(
            "kafka-cluster", project_dir=tmp_path, global_path=tmp_path / "nope.toml"
        )
        assert timing == WaitTiming(
            poll_interval=30,
            timeout=7200,
            delay=10,
            backoff=1.5,
            max_interval=120,
            not_found_checks=20,
        )

    def test_partial_profile_keeps_defaults(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.quick]\ntimeout = 30\n")
        timing = resolve_timing("quick", project_dir=tmp_path, global_path=tmp_path / "nope.toml")
        assert timing.timeout == 30
        assert timing.poll_interval == WaitTiming().poll_interval

    def test_missing_profile(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.quick]\ntimeout = 30\n")
        with pytest.raises(KeyError, match="not found. Available: quick"):
            resolve_timing("slow", project_dir=tmp_path, global_path=tmp_path / "nope.toml")

    def test_unknown_keys(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.quick]\ntimeout = 30\nretries = 3\n")
        with pytest.raises(ConfigurationError, match="unknown keys: retries"):
            resolve_timing("quick", project_dir=tmp_path, global_path=tmp_path / "nope.toml")

    def test_invalid_values(self, tmp_path: Path):
        (tmp_path / "settle.toml").write_text("[profiles.broken]\npoll_interval = 0\n")
        with pytest.raises(ConfigurationError, match="Profile 'broken' is invalid"):
            resolve_timing("broken", project_dir=tmp_path, global_path=tmp_path / "nope.toml")

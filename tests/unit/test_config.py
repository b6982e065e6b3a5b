# =============================================================================
# tests/unit/test_config.py
# Unit Tests for settings loading
# =============================================================================

import pytest

from vanbox_core.config import PROJECT_ROOT, load_secrets_file, load_settings
from vanbox_core.errors import ConfigurationError


class TestLoadSettings:
    """Settings from a secrets mapping"""

    def test_no_secrets_means_demo(self):
        settings = load_settings({})

        assert settings.is_demo
        assert settings.history_limit == 20
        assert settings.max_content_chars == 5000

    def test_supabase_section_selects_supabase(self):
        settings = load_settings({"supabase": {"url": "https://x.supabase.co", "key": "anon"}})

        assert settings.provider == "supabase"
        assert settings.supabase_url == "https://x.supabase.co"
        assert settings.entries_table == "entries"

    def test_explicit_demo_wins_over_credentials(self):
        settings = load_settings({
            "supabase": {"url": "https://x.supabase.co", "key": "anon"},
            "vanbox": {"provider": "demo"},
        })
        assert settings.is_demo

    def test_supabase_without_credentials_fails(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings({"vanbox": {"provider": "supabase"}})
        assert not exc_info.value.recoverable

    def test_unknown_provider_fails(self):
        with pytest.raises(ConfigurationError):
            load_settings({"vanbox": {"provider": "firebase"}})

    def test_overrides_and_int_parsing(self):
        settings = load_settings({
            "vanbox": {
                "provider": "demo",
                "site_url": "https://notes.example.com/",
                "history_limit": "50",
                "max_content_chars": 280,
            }
        })

        assert settings.site_url == "https://notes.example.com"
        assert settings.history_limit == 50
        assert settings.max_content_chars == 280

    def test_bad_int_fails(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings({"vanbox": {"history_limit": "lots"}})
        assert exc_info.value.details["config_key"] == "history_limit"


class TestShellCacheSettings:
    """[vanbox.shell_cache] section"""

    def test_offline_page_is_always_installed(self):
        settings = load_settings({
            "vanbox": {"shell_cache": {"shell_paths": ["/", "/manifest.json"], "offline_path": "/offline.html"}}
        })

        assert settings.shell_cache.shell_paths == ("/", "/manifest.json", "/offline.html")

    def test_relative_cache_dir_is_under_project(self, tmp_path):
        relative = load_settings({"vanbox": {"shell_cache": {"cache_dir": "cache/shell"}}})
        absolute = load_settings({"vanbox": {"shell_cache": {"cache_dir": str(tmp_path)}}})

        assert relative.shell_cache.cache_dir == PROJECT_ROOT / "cache" / "shell"
        assert absolute.shell_cache.cache_dir == tmp_path

    def test_version_and_base_url(self):
        settings = load_settings({
            "vanbox": {"shell_cache": {"version": "vanbox-v2", "base_url": "https://notes.example.com/"}}
        })

        assert settings.shell_cache.version == "vanbox-v2"
        assert settings.shell_cache.base_url == "https://notes.example.com"


class TestSecretsFile:
    """Reading secrets.toml outside Streamlit"""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_secrets_file(tmp_path / "missing.toml") == {}

    def test_reads_toml(self, tmp_path):
        path = tmp_path / "secrets.toml"
        path.write_text('[supabase]\nurl = "https://x.supabase.co"\nkey = "anon"\n')

        settings = load_settings(load_secrets_file(path))
        assert settings.provider == "supabase"

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import Settings, load_settings

ENV_NAMES = (
    "RISKDASH_SUPABASE_URL", "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL",
    "RISKDASH_SUPABASE_KEY", "SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "RISKDASH_TABLE", "RISKDASH_HTTP_TIMEOUT", "RISKDASH_LOG_LEVEL", "RISKDASH_LOG_DIR",
    "RISKDASH_SYNC_INTERVAL_MS", "RISKDASH_CAN_EDIT", "RISKDASH_CAN_CHART", "RISKDASH_TOPMOST",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_store_config() -> None:
    s = Settings.from_env()
    assert not s.store_configured
    assert s.table == "tasks"
    assert s.http_timeout == 10.0
    assert s.log_level == "INFO"
    assert s.log_dir == Path(".local/riskdash")
    assert s.sync_interval_ms == 0
    assert s.capabilities.can_edit and s.capabilities.can_chart


def test_legacy_env_names_are_fallbacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://legacy.supabase.co")
    monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "legacy")
    monkeypatch.setenv("RISKDASH_SUPABASE_URL", "https://primary.supabase.co")
    s = Settings.from_env()
    assert s.supabase_url == "https://primary.supabase.co"
    assert s.supabase_key == "legacy"
    assert s.store_configured


def test_bad_numbers_fall_back_and_flags_parse(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RISKDASH_HTTP_TIMEOUT", "soon")
    monkeypatch.setenv("RISKDASH_SYNC_INTERVAL_MS", "-5")
    monkeypatch.setenv("RISKDASH_CAN_CHART", "no")
    monkeypatch.setenv("RISKDASH_TOPMOST", "yes")
    s = Settings.from_env()
    assert s.http_timeout == 10.0
    assert s.sync_interval_ms == 0
    assert s.capabilities.can_chart is False
    assert s.topmost is True


def test_load_settings_reads_dotenv_without_overriding(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("RISKDASH_TABLE=from_file\nRISKDASH_SUPABASE_KEY=file-key\n", encoding="utf-8")
    # registered so teardown removes what load_dotenv writes into os.environ
    monkeypatch.setenv("RISKDASH_TABLE", "placeholder")
    monkeypatch.delenv("RISKDASH_TABLE")
    monkeypatch.setenv("RISKDASH_SUPABASE_KEY", "real-key")
    s = load_settings(str(env_file))
    assert s.table == "from_file"
    assert s.supabase_key == "real-key"

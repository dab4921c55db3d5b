"""
Pytest tests for ghf.config (directories, stored token, token resolution).

Run from the repo root:
    pytest ghf/test_config.py -v
"""

import stat

import pytest
import yaml

from ghf import config


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("GHF_CONFIG_DIR", raising=False)
    monkeypatch.delenv("GHF_CACHE_DIR", raising=False)
    return home_dir


def _write_gh_hosts(home_dir, payload):
    path = home_dir / ".config" / "gh" / "hosts.yml"
    path.parent.mkdir(parents=True)
    path.write_text(yaml.safe_dump(payload))


# ============================================================================
# directories
# ============================================================================

def test_default_dirs_under_home(home):
    assert config.config_path() == home / ".config" / "ghf" / "config.yml"
    assert config.response_cache_path() == home / ".cache" / "ghf" / "responses.json"


def test_env_overrides(home, tmp_path, monkeypatch):
    monkeypatch.setenv("GHF_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.setenv("GHF_CACHE_DIR", str(tmp_path / "cache"))
    assert config.config_path() == tmp_path / "cfg" / "config.yml"
    assert config.response_cache_path() == tmp_path / "cache" / "responses.json"


# ============================================================================
# stored token
# ============================================================================

def test_store_and_clear_token(home):
    assert config.get_stored_token() is None
    assert config.clear_stored_token() is False

    config.set_stored_token("  ghp_stored \n")
    assert config.get_stored_token() == "ghp_stored"
    mode = stat.S_IMODE(config.config_path().stat().st_mode)
    assert mode == 0o600

    assert config.clear_stored_token() is True
    assert config.get_stored_token() is None


def test_unreadable_config_means_no_token(home):
    path = config.config_path()
    path.parent.mkdir(parents=True)
    path.write_text("token: [unterminated\n")
    assert config.get_stored_token() is None


def test_set_token_keeps_other_keys(home):
    path = config.config_path()
    path.parent.mkdir(parents=True)
    path.write_text(yaml.safe_dump({"editor": "vim"}))
    config.set_stored_token("ghp_x")
    assert yaml.safe_load(path.read_text()) == {"editor": "vim", "token": "ghp_x"}


# ============================================================================
# gh CLI fallback and resolution order
# ============================================================================

def test_gh_cli_token_top_level(home):
    _write_gh_hosts(home, {"github.com": {"oauth_token": "gho_cli", "user": "me"}})
    assert config.get_github_token_from_cli() == "gho_cli"


def test_gh_cli_token_per_user(home):
    _write_gh_hosts(home, {"github.com": {"users": {"me": {"oauth_token": "gho_user"}}}})
    assert config.get_github_token_from_cli() == "gho_user"


def test_resolve_token_order(home):
    assert config.resolve_token() is None

    _write_gh_hosts(home, {"github.com": {"oauth_token": "gho_cli"}})
    assert config.resolve_token() == "gho_cli"

    config.set_stored_token("ghp_stored")
    assert config.resolve_token() == "ghp_stored"

    assert config.resolve_token(" ghp_flag ") == "ghp_flag"
    assert config.resolve_token("   ") == "ghp_stored"

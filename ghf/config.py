# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Configuration: directories and token storage.

Directories:
  - config: $GHF_CONFIG_DIR, else ~/.config/ghf   (config.yml holds the token)
  - cache:  $GHF_CACHE_DIR,  else ~/.cache/ghf    (responses.json)

Token resolution order (first match wins):
  1. explicit --token
  2. token stored by `ghf auth login` (~/.config/ghf/config.yml)
  3. GitHub CLI login (~/.config/gh/hosts.yml, oauth_token)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yml"
RESPONSE_CACHE_FILE_NAME = "responses.json"


def ghf_config_dir() -> Path:
    override = os.environ.get("GHF_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "ghf"


def ghf_cache_dir() -> Path:
    override = os.environ.get("GHF_CACHE_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "ghf"


def config_path() -> Path:
    return ghf_config_dir() / CONFIG_FILE_NAME


def response_cache_path() -> Path:
    return ghf_cache_dir() / RESPONSE_CACHE_FILE_NAME


def _load_config() -> Dict[str, Any]:
    path = config_path()
    try:
        if not path.exists():
            return {}
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.debug("config: could not read %s (%s)", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False)
    os.chmod(path, 0o600)


def get_stored_token() -> Optional[str]:
    tok = _load_config().get("token")
    if isinstance(tok, str) and tok.strip():
        return tok.strip()
    return None


def set_stored_token(token: str) -> None:
    data = _load_config()
    data["token"] = token.strip()
    _save_config(data)


def clear_stored_token() -> bool:
    """Remove the stored token; returns False if none was stored."""
    data = _load_config()
    if "token" not in data:
        return False
    del data["token"]
    _save_config(data)
    return True


def get_github_token_from_cli() -> Optional[str]:
    """Get GitHub token from GitHub CLI configuration (~/.config/gh/hosts.yml)."""
    try:
        gh_config_path = Path.home() / ".config" / "gh" / "hosts.yml"
        if gh_config_path.exists():
            with open(gh_config_path, "r") as f:
                config = yaml.safe_load(f)
                if config and "github.com" in config:
                    github_config = config["github.com"] or {}
                    if "oauth_token" in github_config:
                        return github_config["oauth_token"]
                    for user_config in (github_config.get("users") or {}).values():
                        if isinstance(user_config, dict) and "oauth_token" in user_config:
                            return user_config["oauth_token"]
    except (OSError, yaml.YAMLError):
        pass
    return None


def resolve_token(explicit: Optional[str] = None) -> Optional[str]:
    if explicit and explicit.strip():
        return explicit.strip()
    return get_stored_token() or get_github_token_from_cli()

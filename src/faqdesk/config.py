"""faqdesk configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (FAQDESK_DB, FAQDESK_MODEL, FAQDESK_PAGE_SIZE, FAQDESK_LOG_LEVEL)
  3. Per-project faqdesk.yaml  (working directory)
  4. Global ~/.faqdesk/config.yaml  (defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".faqdesk"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
PROJECT_CONFIG_NAME: str = "faqdesk.yaml"

# Fields that suggest an API key are forbidden in global config.
# Does NOT match legitimate config keys like summary_max_tokens.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"  # api_key, api-key, api_secret, apikey
    r"|_token$"                  # github_token, access_token (suffix)
    r"|^token$"                  # exactly "token"
    r"|_secret$"                 # client_secret (suffix)
    r"|^secret$"                 # exactly "secret"
    r"|passw(?:ord|d)"           # password, passwd
    r"|credential",              # credential, credentials
    re.IGNORECASE,
)

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["store", "view", "ai", "logging"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class StoreCfg:
    """Persistence configuration (faqdesk.yaml: store:)."""

    db_path: str = ".faqdesk.db"


@dataclass
class ViewCfg:
    """List view configuration (faqdesk.yaml: view:)."""

    page_size: int = 12


@dataclass
class AiCfg:
    """Summarization / smart-id configuration (faqdesk.yaml: ai:).

    Attributes:
        model: LiteLLM model string used for summaries and smart ids.
        summary_max_tokens: Output token limit for one summary.
        smart_ids: Ask the model for record ids; False always uses local ids.
    """

    model: str = "gemini/gemini-2.0-flash"
    summary_max_tokens: int = 600
    smart_ids: bool = True


@dataclass
class LoggingCfg:
    """Logging configuration (faqdesk.yaml: logging:)."""

    level: str = "WARNING"
    json: bool = False


@dataclass
class FaqDeskConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    store: StoreCfg = field(default_factory=StoreCfg)
    view: ViewCfg = field(default_factory=ViewCfg)
    ai: AiCfg = field(default_factory=AiCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}', ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: FaqDeskConfig) -> None:
    if cfg.view.page_size < 1:
        raise ConfigError(f"view.page_size must be >= 1, got {cfg.view.page_size}.")
    if cfg.ai.summary_max_tokens < 1:
        raise ConfigError(
            f"ai.summary_max_tokens must be >= 1, got {cfg.ai.summary_max_tokens}."
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> FaqDeskConfig:
    """Build a *FaqDeskConfig* from a merged raw YAML dict."""
    cfg = FaqDeskConfig()

    try:
        if "store" in data:
            s = data["store"] or {}
            cfg.store = StoreCfg(db_path=str(s.get("db_path", cfg.store.db_path)))

        if "view" in data:
            v = data["view"] or {}
            cfg.view = ViewCfg(page_size=int(v.get("page_size", cfg.view.page_size)))

        if "ai" in data:
            a = data["ai"] or {}
            cfg.ai = AiCfg(
                model=str(a.get("model", cfg.ai.model)),
                summary_max_tokens=int(
                    a.get("summary_max_tokens", cfg.ai.summary_max_tokens)
                ),
                smart_ids=bool(a.get("smart_ids", cfg.ai.smart_ids)),
            )

        if "logging" in data:
            lg = data["logging"] or {}
            cfg.logging = LoggingCfg(
                level=str(lg.get("level", cfg.logging.level)).upper(),
                json=bool(lg.get("json", cfg.logging.json)),
            )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: FaqDeskConfig) -> FaqDeskConfig:
    """Apply FAQDESK_* environment variable overrides."""
    if db := os.environ.get("FAQDESK_DB"):
        cfg.store.db_path = db
    if model := os.environ.get("FAQDESK_MODEL"):
        cfg.ai.model = model
    if page_size := os.environ.get("FAQDESK_PAGE_SIZE"):
        try:
            cfg.view.page_size = int(page_size)
        except ValueError as exc:
            raise ConfigError(f"FAQDESK_PAGE_SIZE must be an integer, got '{page_size}'.") from exc
    if level := os.environ.get("FAQDESK_LOG_LEVEL"):
        cfg.logging.level = level.upper()
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> FaqDeskConfig:
    """Load and return a merged *FaqDeskConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *faqdesk.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields, or a value
            has the wrong type or is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)
    _validate(cfg)

    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.faqdesk/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# faqdesk global configuration — defaults only.\n"
            "# NEVER store API keys here — use environment variables:\n"
            "#   export GEMINI_API_KEY=...\n"
            "#   export OPENAI_API_KEY=sk-...\n"
            "\n"
            "ai:\n"
            "  model: gemini/gemini-2.0-flash\n"
            "\n"
            "view:\n"
            "  page_size: 12\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target


def write_project_config(project_dir: Path) -> Path | None:
    """Write a starter faqdesk.yaml into *project_dir* unless one exists.

    Returns the path written, or None if the file was already present.
    """
    target = project_dir / PROJECT_CONFIG_NAME
    if target.exists():
        return None
    data = {
        "store": {"db_path": StoreCfg().db_path},
        "view": {"page_size": ViewCfg().page_size},
        "ai": {"model": AiCfg().model, "smart_ids": True},
    }
    target.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return target

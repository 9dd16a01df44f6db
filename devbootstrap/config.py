from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PreferenceSetting:
    domain: str
    key: str
    value_type: str
    value: Any

    VALUE_TYPES = ("bool", "int", "float", "string")

    def defaults_value(self) -> str:
        """Render the value the way `defaults write -<type>` expects it."""
        if self.value_type == "bool":
            return "true" if self.value in (True, "true", "yes", 1, "1") else "false"
        return str(self.value)


@dataclass(frozen=True)
class CaskSpec:
    token: str
    app_name: str


DEFAULT_PREFERENCES: List[PreferenceSetting] = [
    # Secondary click everywhere
    PreferenceSetting("NSGlobalDomain", "ContextMenuGesture", "int", 1),
    PreferenceSetting("NSGlobalDomain", "com.apple.trackpad.enableSecondaryClick", "bool", True),
    # Built-in trackpad
    PreferenceSetting("com.apple.AppleMultitouchTrackpad", "TrackpadRightClick", "bool", True),
    PreferenceSetting("com.apple.AppleMultitouchTrackpad", "TrackpadCornerSecondaryClick", "int", 2),
    # Bluetooth trackpad
    PreferenceSetting("com.apple.driver.AppleBluetoothMultitouch.trackpad", "TrackpadRightClick", "bool", True),
    PreferenceSetting("com.apple.driver.AppleBluetoothMultitouch.trackpad", "TrackpadCornerSecondaryClick", "int", 2),
    # Mission Control / App Exposé / Show Desktop gestures off
    PreferenceSetting("com.apple.dock", "showMissionControlGestureEnabled", "bool", False),
    PreferenceSetting("com.apple.dock", "showAppExposeGestureEnabled", "bool", False),
    PreferenceSetting("com.apple.dock", "showDesktopGestureEnabled", "bool", False),
]

DEFAULT_RESTART_SERVICES = ["cfprefsd", "SystemUIServer", "Dock"]

DEFAULT_HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
# Apple silicon first, then Intel.
DEFAULT_HOMEBREW_PREFIXES = ["/opt/homebrew", "/usr/local"]

DEFAULT_FORMULAE = ["git", "python", "node", "gh"]

DEFAULT_CASKS: List[CaskSpec] = [
    CaskSpec("visual-studio-code", "Visual Studio Code"),
    CaskSpec("chatgpt", "ChatGPT"),
    CaskSpec("spotify", "Spotify"),
]

DEFAULT_COMMAND_ALIASES = {"python": "python3"}

DEFAULT_EXTENSIONS = [
    "esbenp.prettier-vscode",
    "ms-python.python",
    "ms-python.black-formatter",
    "dbaeumer.vscode-eslint",
    "pkief.material-icon-theme",
    "eamodio.gitlens",
]

DEFAULT_EDITOR_SETTINGS: Dict[str, Any] = {
    "workbench.colorTheme": "Default Dark Modern",
    "workbench.iconTheme": "material-icon-theme",
    "editor.tabSize": 2,
    "editor.insertSpaces": True,
    "editor.formatOnSave": True,
    "editor.defaultFormatter": "esbenp.prettier-vscode",
    "[python]": {
        "editor.defaultFormatter": "ms-python.black-formatter",
    },
    "files.trimTrailingWhitespace": True,
}

DEFAULT_EDITOR_KEYBINDINGS: List[Dict[str, str]] = [
    {"key": "cmd+d", "command": "editor.action.copyLinesDownAction", "when": "editorTextFocus"},
    {"key": "cmd+shift+k", "command": "editor.action.deleteLines", "when": "editorTextFocus"},
    {"key": "cmd+shift+f", "command": "editor.action.formatDocument", "when": "editorTextFocus"},
]


def _expand(p: str) -> str:
    return str(Path(p).expanduser())


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        sec = self.raw.get(name) or {}
        if not isinstance(sec, dict):
            raise ConfigError(f"{name} must be a mapping")
        return sec

    # --- preferences -------------------------------------------------

    @property
    def preferences(self) -> List[PreferenceSetting]:
        items = self.raw.get("preferences")
        if items is None:
            return list(DEFAULT_PREFERENCES)
        out: List[PreferenceSetting] = []
        for item in items:
            try:
                pref = PreferenceSetting(
                    domain=str(item["domain"]),
                    key=str(item["key"]),
                    value_type=str(item.get("type", "string")),
                    value=item["value"],
                )
            except (KeyError, TypeError, AttributeError) as e:
                raise ConfigError(f"Invalid preference entry: {item!r}") from e
            if pref.value_type not in PreferenceSetting.VALUE_TYPES:
                raise ConfigError(f"Unsupported preference type {pref.value_type!r} for {pref.key}")
            out.append(pref)
        return out

    @property
    def restart_services(self) -> List[str]:
        items = self.raw.get("restart_services")
        return list(DEFAULT_RESTART_SERVICES if items is None else items)

    # --- homebrew ----------------------------------------------------

    @property
    def homebrew_install_url(self) -> str:
        return str(self._section("homebrew").get("install_url") or DEFAULT_HOMEBREW_INSTALL_URL)

    @property
    def homebrew_prefixes(self) -> List[str]:
        return [_expand(p) for p in (self._section("homebrew").get("prefixes") or DEFAULT_HOMEBREW_PREFIXES)]

    @property
    def persist_shellenv(self) -> bool:
        return bool(self._section("homebrew").get("persist_shellenv", True))

    @property
    def profile_path(self) -> str:
        return _expand(str(self._section("homebrew").get("profile_path") or "~/.zprofile"))

    @property
    def formulae(self) -> List[str]:
        items = self.raw.get("formulae")
        return [str(f) for f in (DEFAULT_FORMULAE if items is None else items)]

    @property
    def casks(self) -> List[CaskSpec]:
        items = self.raw.get("casks")
        if items is None:
            return list(DEFAULT_CASKS)
        out: List[CaskSpec] = []
        for item in items:
            if isinstance(item, str):
                out.append(CaskSpec(token=item, app_name=item))
                continue
            try:
                out.append(CaskSpec(token=str(item["token"]), app_name=str(item.get("app") or item["token"])))
            except (KeyError, TypeError, AttributeError) as e:
                raise ConfigError(f"Invalid cask entry: {item!r}") from e
        return out

    @property
    def applications_dir(self) -> str:
        return _expand(str(self.raw.get("applications_dir") or "/Applications"))

    @property
    def command_aliases(self) -> Dict[str, str]:
        aliases = self.raw.get("command_aliases")
        return dict(DEFAULT_COMMAND_ALIASES if aliases is None else aliases)

    @property
    def link_dir(self) -> str:
        return _expand(str(self.raw.get("link_dir") or "/usr/local/bin"))

    @property
    def link_with_sudo(self) -> bool:
        return bool(self.raw.get("link_with_sudo", True))

    # --- git / ssh ---------------------------------------------------

    @property
    def git_editor(self) -> str:
        return str(self._section("git").get("editor") or "code --wait")

    @property
    def git_default_branch(self) -> str:
        return str(self._section("git").get("default_branch") or "main")

    @property
    def ssh_key_path(self) -> str:
        return _expand(str(self._section("ssh").get("key_path") or "~/.ssh/id_ed25519"))

    @property
    def ssh_use_keychain(self) -> bool:
        return bool(self._section("ssh").get("keychain", True))

    # --- github ------------------------------------------------------

    @property
    def github_host(self) -> str:
        return str(self._section("github").get("host") or "github.com")

    @property
    def repo_limit(self) -> int:
        return int(self._section("github").get("repo_limit") or 100)

    @property
    def clone_url(self) -> str:
        """Clone URL template; ``{repo}`` is ``owner/name``."""
        return str(self._section("github").get("clone_url") or f"git@{self.github_host}:{{repo}}.git")

    @property
    def dev_root(self) -> str:
        return _expand(str(self.raw.get("dev_root") or "~/development"))

    # --- editor ------------------------------------------------------

    @property
    def editor_cli(self) -> str:
        return str(self._section("editor").get("cli") or "code")

    @property
    def editor_config_dir(self) -> str:
        return _expand(str(self._section("editor").get("config_dir") or "~/Library/Application Support/Code/User"))

    @property
    def editor_extensions(self) -> List[str]:
        items = self._section("editor").get("extensions")
        return [str(e) for e in (DEFAULT_EXTENSIONS if items is None else items)]

    @property
    def editor_opener(self) -> str:
        return str(self._section("editor").get("opener") or "open")

    @property
    def editor_settings(self) -> Dict[str, Any]:
        doc = self._section("editor").get("settings")
        return copy.deepcopy(DEFAULT_EDITOR_SETTINGS if doc is None else doc)

    @property
    def editor_keybindings(self) -> List[Dict[str, Any]]:
        doc = self._section("editor").get("keybindings")
        return copy.deepcopy(DEFAULT_EDITOR_KEYBINDINGS if doc is None else doc)

    # --- run ---------------------------------------------------------

    @property
    def command_timeout(self) -> Optional[float]:
        t = self.raw.get("command_timeout")
        return None if t is None else float(t)

    @property
    def answers(self) -> Dict[str, Any]:
        return dict(self._section("answers"))

    def validate(self) -> "BootstrapConfig":
        """Read every property once so a malformed file fails before any stage runs."""
        for name, attr in vars(type(self)).items():
            if not isinstance(attr, property):
                continue
            try:
                getattr(self, name)
            except ConfigError:
                raise
            except (TypeError, ValueError, KeyError, AttributeError) as e:
                raise ConfigError(f"Invalid value for {name}: {e}") from e
        return self


def load_config(path: Optional[str], *, required: bool = False) -> BootstrapConfig:
    """Load a YAML config; no path (or a missing optional file) yields the built-in defaults."""

    if not path:
        return BootstrapConfig(raw={})

    p = Path(path).expanduser()
    if not p.exists():
        if required:
            raise FileNotFoundError(path)
        logger.info("No config at %s; using built-in defaults", p)
        return BootstrapConfig(raw={})

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    logger.info("Loaded config %s", p)
    return BootstrapConfig(raw=raw).validate()

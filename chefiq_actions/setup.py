"""
Interactive CLI setup wizard for mcp-chefiq-actions.
Supports French and English UI.
"""

import getpass
import json
import platform
import shutil
import sys
from pathlib import Path

from .llm_service import DEFAULT_MODEL

# ---------------------------------------------------------------------------
# i18n: all user-facing strings
# ---------------------------------------------------------------------------
STRINGS = {
    "fr": {
        "title": "=== mcp-chefiq-actions - Configuration ===",
        "binary_found": "Binaire trouve : {}",
        "binary_not_found": "Attention : 'mcp-chefiq-actions' introuvable dans le PATH.",
        "binary_ask": "Entrez le chemin complet du binaire (ou Entree pour utiliser le nom tel quel) : ",
        "ai_header": "--- Analyse IA (Gemini, optionnelle) ---",
        "key_prompt": "Cle API Gemini (Entree pour l'analyse locale uniquement) : ",
        "key_skipped": "Pas de cle : seule l'analyse locale sera utilisee.",
        "model_prompt": "Modele Gemini [{}] : ",
        "log_header": "--- Journaux ---",
        "log_prompt": "Niveau de log (DEBUG, INFO, WARNING) [INFO] : ",
        "log_invalid": "Niveau invalide '{}', INFO par defaut.",
        "config_file": "Fichier de config : {}",
        "summary_header": "--- Resume ---",
        "summary_binary": "  Binaire      : {}",
        "summary_key": "  Cle API      : {}",
        "summary_model": "  Modele       : {}",
        "summary_log": "  Log          : {}",
        "summary_config": "  Config       : {}",
        "other_servers": "  Autres serveurs MCP (conserves) : {}",
        "confirm": "Ecrire la config ? [O/n] ",
        "aborted": "Abandonne.",
        "done_written": "Config ecrite dans {}",
        "done_restart": "Redemarrez Claude Desktop pour utiliser le MCP !",
        "already_installed": "chefiq-actions est deja configure (analyse IA : {}).",
        "already_menu": "  1) Changer la cle API uniquement\n  2) Tout reconfigurer\n  3) Quitter",
        "already_prompt": "Votre choix [3] : ",
        "already_ok": "Rien a faire. Bonne cuisine !",
        "key_updated": "Cle API mise a jour !",
        "ai_on": "activee",
        "ai_off": "desactivee",
    },
    "en": {
        "title": "=== mcp-chefiq-actions - Setup ===",
        "binary_found": "Binary found: {}",
        "binary_not_found": "Warning: 'mcp-chefiq-actions' not found on PATH.",
        "binary_ask": "Enter the full path to the binary (or press Enter to use the name as-is): ",
        "ai_header": "--- AI analysis (Gemini, optional) ---",
        "key_prompt": "Gemini API key (Enter for local analysis only): ",
        "key_skipped": "No key: only the local analyzer will be used.",
        "model_prompt": "Gemini model [{}]: ",
        "log_header": "--- Logging ---",
        "log_prompt": "Log level (DEBUG, INFO, WARNING) [INFO]: ",
        "log_invalid": "Invalid level '{}', defaulting to INFO.",
        "config_file": "Config file: {}",
        "summary_header": "--- Summary ---",
        "summary_binary": "  Binary:    {}",
        "summary_key": "  API key:   {}",
        "summary_model": "  Model:     {}",
        "summary_log": "  Log level: {}",
        "summary_config": "  Config:    {}",
        "other_servers": "  Other MCP servers (preserved): {}",
        "confirm": "Write config? [Y/n] ",
        "aborted": "Aborted.",
        "done_written": "Config written to {}",
        "done_restart": "Restart Claude Desktop to use the MCP!",
        "already_installed": "chefiq-actions is already configured (AI analysis: {}).",
        "already_menu": "  1) Change the API key only\n  2) Full reconfiguration\n  3) Quit",
        "already_prompt": "Your choice [3]: ",
        "already_ok": "Nothing to do. Happy cooking!",
        "key_updated": "API key updated!",
        "ai_on": "on",
        "ai_off": "off",
    },
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

SERVER_KEY = "chefiq-actions"
BINARY_NAME = "mcp-chefiq-actions"


def _get_config_path() -> Path:
    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"
    if system == "Windows":
        appdata = Path.home() / "AppData" / "Roaming"
        return appdata / "Claude" / "claude_desktop_config.json"
    return Path.home() / ".config" / "Claude" / "claude_desktop_config.json"


def _find_binary() -> str | None:
    return shutil.which(BINARY_NAME)


def _ask_language() -> str:
    """Ask the user for UI language. Returns 'fr' or 'en'."""
    print(f"\n=== {BINARY_NAME} ===\n")
    choice = input("  1) Francais\n  2) English\nChoisissez la langue / Choose language [1] : ").strip() or "1"
    return "en" if choice == "2" else "fr"


def _mask(secret: str) -> str:
    if not secret:
        return "-"
    return secret[:4] + "*" * (len(secret) - 4) if len(secret) > 4 else "***"


def _build_server_entry(binary_path: str, api_key: str, model: str, log_level: str) -> dict:
    env = {"CHEFIQ_LOG_LEVEL": log_level}
    if api_key:
        env["GEMINI_API_KEY"] = api_key
        env["GEMINI_MODEL"] = model
    return {"command": binary_path, "env": env}


def _write_config(config_path: Path, config: dict) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        json.dumps(config, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def _read_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        return json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}


def _ask_gemini(t: dict) -> tuple[str, str]:
    """Prompt for the optional Gemini key and, when given, the model."""
    print(f"\n{t['ai_header']}")
    api_key = getpass.getpass(t["key_prompt"]).strip()
    if not api_key:
        print(t["key_skipped"])
        return "", DEFAULT_MODEL
    return api_key, input(t["model_prompt"].format(DEFAULT_MODEL)).strip() or DEFAULT_MODEL


def _ask_log_level(t: dict) -> str:
    print(f"\n{t['log_header']}")
    level = input(t["log_prompt"]).strip().upper() or "INFO"
    if level not in LOG_LEVELS:
        print(t["log_invalid"].format(level))
        return "INFO"
    return level


def _swap_api_key(env: dict, t: dict) -> None:
    # A blank key turns the AI path off; the model goes with it.
    print(f"\n{t['ai_header']}")
    api_key = getpass.getpass(t["key_prompt"]).strip()
    if api_key:
        env["GEMINI_API_KEY"] = api_key
        env.setdefault("GEMINI_MODEL", DEFAULT_MODEL)
    else:
        env.pop("GEMINI_API_KEY", None)
        env.pop("GEMINI_MODEL", None)
        print(t["key_skipped"])


def _print_summary(t: dict, servers: dict, config_path: Path) -> None:
    entry = servers[SERVER_KEY]
    env = entry["env"]
    print(f"\n{t['summary_header']}")
    print(t["summary_binary"].format(entry["command"]))
    print(t["summary_key"].format(_mask(env.get("GEMINI_API_KEY", ""))))
    if "GEMINI_MODEL" in env:
        print(t["summary_model"].format(env["GEMINI_MODEL"]))
    print(t["summary_log"].format(env["CHEFIQ_LOG_LEVEL"]))
    print(t["summary_config"].format(config_path))
    others = [name for name in servers if name != SERVER_KEY]
    if others:
        print(t["other_servers"].format(", ".join(others)))


def main() -> None:
    t = STRINGS[_ask_language()]
    print(f"\n{t['title']}")

    config_path = _get_config_path()
    existing = _read_config(config_path)

    current = existing.get("mcpServers", {}).get(SERVER_KEY)
    if current:
        env = current.setdefault("env", {})
        ai_state = t["ai_on"] if env.get("GEMINI_API_KEY") else t["ai_off"]
        print(f"\n{t['already_installed'].format(ai_state)}")
        print(t["already_menu"])
        choice = input(t["already_prompt"]).strip() or "3"
        if choice == "1":
            _swap_api_key(env, t)
            _write_config(config_path, existing)
            print(f"\n{t['key_updated']}")
            print(t["done_restart"])
            sys.exit(0)
        if choice != "2":
            print(t["already_ok"])
            sys.exit(0)

    binary = _find_binary()
    if binary:
        print(f"\n{t['binary_found'].format(binary)}")
    else:
        print(f"\n{t['binary_not_found']}")
        binary = input(t["binary_ask"]).strip() or BINARY_NAME

    api_key, model = _ask_gemini(t)
    log_level = _ask_log_level(t)
    print(f"\n{t['config_file'].format(config_path)}")

    servers = existing.setdefault("mcpServers", {})
    servers[SERVER_KEY] = _build_server_entry(binary, api_key, model, log_level)
    _print_summary(t, servers, config_path)

    confirm = input(f"\n{t['confirm']}").strip().lower()
    if confirm not in ("o", "y", ""):
        print(t["aborted"])
        sys.exit(0)

    _write_config(config_path, existing)
    print(f"\n{t['done_written'].format(config_path)}")
    print(t["done_restart"])


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
🔧 PrayLine setup command
Writes ``~/.claude/claude-pray.json`` so the statusline knows where you are.
"""

import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import ConfigManager, is_configured
from .config_schema import PrayConfig
from .constants import CALCULATION_METHODS, DEFAULT_METHOD
from .utils.validation import is_valid_method
from .version import get_app_info


def _usage() -> None:
    print(f"🕌 {get_app_info()} setup")
    print()
    print("Usage:")
    print("  prayline-setup set <city> <country> [method]   # Enable with location")
    print("  prayline-setup disable                         # Hide prayer times")
    print("  prayline-setup show                            # Show current config")
    print("  prayline-setup methods                         # List calculation methods")


def list_methods() -> None:
    for method_id, name in sorted(CALCULATION_METHODS.items()):
        marker = " (default)" if method_id == DEFAULT_METHOD else ""
        print(f"  {method_id:>2}  {name}{marker}")


def show(manager: ConfigManager) -> None:
    config = manager.load_config()
    print(f"📄 Config file: {manager.config_path}")
    if not is_configured(config):
        print("ℹ️  PrayLine is not configured")
        return
    print(f"📍 Location: {config.city}, {config.country}")
    print(f"🧮 Method: {config.method} ({config.method_name})")


def set_location(manager: ConfigManager, args: List[str]) -> bool:
    if len(args) < 2:
        print("❌ City and country are required")
        return False

    city, country = args[0], args[1]
    method = DEFAULT_METHOD
    if len(args) > 2:
        try:
            method = int(args[2])
        except ValueError:
            method = -1
        if not is_valid_method(method):
            print(f"❌ Invalid method: {args[2]} (see 'prayline-setup methods')")
            return False

    try:
        config = PrayConfig(city=city, country=country, method=method, enabled=True)
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e.errors()[0]['msg']}")
        return False

    if not manager.save_config(config):
        print(f"❌ Could not write {manager.config_path}")
        return False

    print(f"✅ Saved {city}, {country} using {config.method_name}")
    return True


def disable(manager: ConfigManager) -> bool:
    config = manager.load_config()
    if not is_configured(config):
        print("ℹ️  PrayLine is already disabled")
        return True
    if not manager.save_config(config.model_copy(update={"enabled": False})):
        print(f"❌ Could not write {manager.config_path}")
        return False
    print("✅ Prayer times hidden")
    return True


def main(argv: Optional[List[str]] = None, config_path: Optional[str] = None) -> int:
    """Main CLI interface"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        _usage()
        return 1

    manager = ConfigManager(config_path)
    command, rest = args[0].lower(), args[1:]

    if command == "set":
        return 0 if set_location(manager, rest) else 1
    elif command == "disable":
        return 0 if disable(manager) else 1
    elif command == "show":
        show(manager)
        return 0
    elif command == "methods":
        list_methods()
        return 0
    else:
        print(f"❌ Unknown command: {command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

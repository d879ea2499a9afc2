"""
Preferences CLI: read/write a file-backed preference store.

Usage:
  python -m shared_preferences.cli read [key]
  python -m shared_preferences.cli write <key> <value> [--type int]
  python -m shared_preferences.cli delete <key>
  python -m shared_preferences.cli clear
  python -m shared_preferences.cli init

Options:
  --name <name>    Store name (default: default)
  --dir <dir>      Store directory (default: $PREFS_DIR or ~/.shared_preferences)
"""
import argparse
import json
import os
import sys

from shared_preferences.backends import FileBackend
from shared_preferences.common.values import ValueType
from shared_preferences.preferences import Preferences

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_value(raw: str, value_type: ValueType):
    """Turn command line text into a value of the requested shape."""
    if value_type is ValueType.STRING:
        return raw
    if value_type in (ValueType.INT, ValueType.LONG):
        return int(raw)
    if value_type is ValueType.FLOAT:
        return float(raw)
    if value_type is ValueType.BOOLEAN:
        lowered = raw.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"Not a boolean: {raw}")
    return {part.strip() for part in raw.split(",") if part.strip()}


def _printable(value):
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Preferences CLI - read/write file-backed preferences",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  read [key]           Read one key or all keys
  write <key> <value>  Write one key (string sets are comma separated)
  delete <key>         Delete one key
  clear                Delete every key
  init                 Create an empty store file
        """,
    )
    parser.add_argument("--name", default="default", help="Store name")
    parser.add_argument("--dir", dest="directory", default=None, help="Store directory")
    parser.add_argument(
        "--type",
        dest="value_type",
        default=ValueType.STRING.value,
        choices=[t.value for t in ValueType],
        help="Value type for write",
    )
    parser.add_argument(
        "command", nargs="?", choices=["read", "write", "delete", "clear", "init"], help="Command"
    )
    parser.add_argument("args", nargs="*", help="Key and/or value")
    parsed = parser.parse_args()

    cmd = (parsed.command or "").lower()
    args = parsed.args or []

    if not cmd:
        parser.print_help()
        sys.exit(0)

    backend = FileBackend(name=parsed.name, directory=parsed.directory)
    prefs = Preferences(backend)

    try:
        if cmd == "read":
            key = args[0] if args else None
            if key:
                if key not in prefs:
                    print(f"Key not found: {key}", file=sys.stderr)
                    sys.exit(1)
                print(json.dumps(_printable(prefs.get_all()[key]), ensure_ascii=False))
            else:
                data = {k: _printable(v) for k, v in prefs.get_all().items()}
                print(json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True))

        elif cmd == "write":
            if len(args) < 2:
                print("Usage: write <key> <value>", file=sys.stderr)
                sys.exit(1)
            key, raw = args[0], " ".join(args[1:]).strip().strip("'\"")
            value_type = ValueType(parsed.value_type)
            editor = prefs.edit()
            value = parse_value(raw, value_type)
            {
                ValueType.STRING: editor.put_string,
                ValueType.INT: editor.put_int,
                ValueType.LONG: editor.put_long,
                ValueType.FLOAT: editor.put_float,
                ValueType.BOOLEAN: editor.put_boolean,
                ValueType.STRING_SET: editor.put_string_set,
            }[value_type](key, value)
            if not editor.commit():
                print(f"Failed to write {backend.get_path()}", file=sys.stderr)
                sys.exit(1)
            print(f"Written: {key}")

        elif cmd == "delete":
            if not args:
                print("Usage: delete <key>", file=sys.stderr)
                sys.exit(1)
            key = args[0]
            if key not in prefs:
                print(f"Key not found: {key}", file=sys.stderr)
                sys.exit(1)
            if not prefs.edit().remove(key).commit():
                print(f"Failed to write {backend.get_path()}", file=sys.stderr)
                sys.exit(1)
            print(f"Deleted: {key}")

        elif cmd == "clear":
            if not prefs.edit().clear().commit():
                print(f"Failed to write {backend.get_path()}", file=sys.stderr)
                sys.exit(1)
            print(f"Cleared: {backend.get_path()}")

        elif cmd == "init":
            if os.path.isfile(backend.get_path()):
                print(f"File already exists: {backend.get_path()}", file=sys.stderr)
                sys.exit(1)
            backend.flush(force=True)
            print(f"Created: {backend.get_path()}")

    except Exception as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

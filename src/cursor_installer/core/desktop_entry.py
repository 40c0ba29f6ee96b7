"""Launcher and CLI shim file formats.

Both files embed the artifact path. Rendering and parsing live side by side
so the status check reads back exactly what configuration writes.

Launcher Exec= values follow the Desktop Entry quoting rules. An argument
containing a reserved character is double-quoted, with double quote,
backtick, dollar and backslash escaped by a backslash. A literal percent sign
is doubled. The value then gets the generic string escaping, where each
backslash is written twice. The shim stores the path in a bash double-quoted
string, which escapes the same four characters.
"""

import re
from pathlib import Path

LAUNCH_FLAG = "--no-sandbox"

_EXEC_RESERVED = frozenset(" \t\n\r\"'\\><~|&;$*?#()`")
_DOUBLE_QUOTE_SPECIAL = re.compile(r'(["`$\\])')
_DOUBLE_QUOTE_ESCAPE = re.compile(r'\\(["`$\\])')
_STRING_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}
_STRING_ESCAPE = re.compile(r"\\(.)", re.DOTALL)

_SHIM_PATH_PATTERN = re.compile(r'^APPIMAGE_PATH="((?:[^"\\]|\\.)*)"', re.MULTILINE | re.DOTALL)


def _escape_double_quoted(value: str) -> str:
    return _DOUBLE_QUOTE_SPECIAL.sub(r"\\\1", value)


def _unescape_double_quoted(value: str) -> str:
    return _DOUBLE_QUOTE_ESCAPE.sub(r"\1", value)


def _exec_argument(path: Path) -> str:
    value = str(path).replace("%", "%%")
    if any(ch in _EXEC_RESERVED for ch in value):
        value = f'"{_escape_double_quoted(value)}"'
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def _unescape_string(value: str) -> str:
    return _STRING_ESCAPE.sub(lambda m: _STRING_ESCAPES.get(m.group(1), m.group(0)), value)


def _first_exec_argument(command: str) -> str | None:
    command = command.lstrip(" \t")
    if not command:
        return None
    if not command.startswith('"'):
        return command.split(maxsplit=1)[0]

    chars: list[str] = []
    i = 1
    while i < len(command):
        ch = command[i]
        if ch == "\\" and i + 1 < len(command):
            chars.append(command[i + 1])
            i += 2
            continue
        if ch == '"':
            return "".join(chars)
        chars.append(ch)
        i += 1
    # unterminated quote
    return None


def render_launcher(artifact_path: Path, icon_path: Path) -> str:
    """Desktop entry content for the artifact.

    Everything except the Exec= and Icon= lines is fixed.
    """
    return f"""[Desktop Entry]
Type=Application
Name=Cursor
GenericName=Intelligent, fast, and familiar, Cursor is the best way to code with AI.
Exec={_exec_argument(artifact_path)} {LAUNCH_FLAG}
Icon={icon_path}
Categories=Utility;Development
StartupWMClass=Cursor
Terminal=false
Comment=Cursor is an AI-first coding environment for software development.
Keywords=cursor;ai;code;editor;ide;artificial;intelligence;learning;programming;developer;development;software;engineering;productivity;vscode;sublime;coding;gpt;openai;copilot;
MimeType=x-scheme-handler/cursor;
"""


def parse_launcher_exec_path(content: str) -> str | None:
    """Return the program path from the first Exec= line, or None if absent or malformed."""
    for line in content.splitlines():
        if not line.startswith("Exec="):
            continue
        program = _first_exec_argument(_unescape_string(line[len("Exec=") :]))
        if program is None:
            return None
        return program.replace("%%", "%")
    return None


def render_cli_shim(artifact_path: Path) -> str:
    """Bash script that launches the artifact detached from the terminal."""
    return f"""#!/bin/bash

APPIMAGE_PATH="{_escape_double_quoted(str(artifact_path))}"

if [[ ! -f "$APPIMAGE_PATH" ]]; then
   echo "Error: Cursor AppImage not found at $APPIMAGE_PATH" >&2;
   exit 1;
fi

"$APPIMAGE_PATH" {LAUNCH_FLAG} "$@" &> /dev/null &
"""


def parse_cli_shim_path(content: str) -> str | None:
    """Return the APPIMAGE_PATH constant embedded in a shim, or None if absent."""
    match = _SHIM_PATH_PATTERN.search(content)
    if match is None:
        return None
    return _unescape_double_quoted(match.group(1))

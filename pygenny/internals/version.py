from __future__ import annotations
import platform, sys

import lark

from pygenny import __version__ as app_ver, __dev__ as is_dev


def _get_versions() -> dict[str, str]:
    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": getattr(lark, "__version__", "unknown"),
    }


def version_line() -> str:
    v = _get_versions()
    dev_marker = " (dev)" if is_dev else ""
    return f"pygenny {v['app']}{dev_marker} • Python {v['python']} • lark {v['lark']}"


def print_banner(stream=None) -> None:
    stream = stream or sys.stdout
    use_ansi = getattr(stream, "isatty", lambda: False)()
    BOLD, RESET = ("\x1b[1m", "\x1b[0m") if use_ansi else ("", "")
    print(f"{BOLD}{version_line()}{RESET}", file=stream)

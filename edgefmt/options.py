from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .classify import DEFAULT_FLAT_DIRECTIVES
from .errors import ConfigError

CONFIG_FILE_NAMES = (".edgefmt.yaml", ".edgefmt.yml")

# Host-style camelCase spellings accepted next to the snake_case field names
_ALIASES = {
    "useTabs": "use_tabs",
    "tabWidth": "tab_width",
    "printWidth": "print_width",
    "singleAttributePerLine": "single_attribute_per_line",
    "flatDirectives": "flat_directives",
}

_YAML = YAML(typ="safe")


# --- helpers ---------------------------------------------------------------
def _assert_only_keys(d: Mapping[str, Any], allowed: Iterable[str], *, ctx: str) -> None:
    extra = set(d.keys()) - set(allowed)
    if extra:
        raise ConfigError(f"{ctx}: unknown key(s): {', '.join(sorted(map(str, extra)))}")


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key}: expected a boolean, got {value!r}")
    return value


def _as_int(value: Any, key: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{key}: must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class FormatOptions:
    """
    Layout options of one format call.
    """
    use_tabs: bool = False
    tab_width: int = 4
    print_width: int = 80
    single_attribute_per_line: bool = False
    # keywords of directives that never open an indented block
    flat_directives: Tuple[str, ...] = DEFAULT_FLAT_DIRECTIVES

    @staticmethod
    def from_dict(d: Optional[Mapping[str, Any]]) -> FormatOptions:
        """Build options from a mapping (YAML config or host options)."""
        if not d:
            return FormatOptions()

        data: Dict[str, Any] = {_ALIASES.get(k, k): v for k, v in d.items()}
        _assert_only_keys(data, [
            "use_tabs", "tab_width", "print_width", "single_attribute_per_line", "flat_directives",
        ], ctx="FormatOptions")

        opts = FormatOptions()
        if "use_tabs" in data:
            opts = replace(opts, use_tabs=_as_bool(data["use_tabs"], "use_tabs"))
        if "tab_width" in data:
            opts = replace(opts, tab_width=_as_int(data["tab_width"], "tab_width", minimum=0))
        if "print_width" in data:
            opts = replace(opts, print_width=_as_int(data["print_width"], "print_width", minimum=1))
        if "single_attribute_per_line" in data:
            opts = replace(opts, single_attribute_per_line=_as_bool(
                data["single_attribute_per_line"], "single_attribute_per_line"))
        if "flat_directives" in data:
            raw = data["flat_directives"]
            if not isinstance(raw, (list, tuple)) or not all(isinstance(k, str) and k for k in raw):
                raise ConfigError("flat_directives: expected a list of directive keywords")
            opts = replace(opts, flat_directives=tuple(k.lstrip("@") for k in raw))
        return opts

    def merged(self, overrides: Mapping[str, Any]) -> FormatOptions:
        """Copy with the non-None entries of `overrides` applied (CLI flags over file config)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        data: Dict[str, Any] = {name: getattr(self, name) for name in self.__dataclass_fields__}
        data.update(changes)
        return FormatOptions.from_dict(data)


def load_options(path: Path) -> FormatOptions:
    """
    Load options from a YAML file.

    Args:
        path: Config file; its top-level mapping holds the option keys

    Returns:
        Parsed options (defaults for an empty file)

    Raises:
        ConfigError: If the file cannot be read or holds invalid options
    """
    try:
        data = _YAML.load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return FormatOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top-level value must be a mapping")
    return FormatOptions.from_dict(data)


def find_config(start: Path) -> Optional[Path]:
    """Look for a config file in `start` and its parents."""
    directory = (start if start.is_dir() else start.parent).resolve()
    for candidate_dir in [directory, *directory.parents]:
        for name in CONFIG_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None


__all__ = ["FormatOptions", "load_options", "find_config", "CONFIG_FILE_NAMES"]

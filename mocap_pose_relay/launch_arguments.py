"""
Launch argument handling for the relay node.

Launch arguments default to empty strings; only arguments the user actually
set become parameter overrides, so values from the YAML config file are kept
otherwise.
"""

from typing import Any, Dict, Mapping

from .errors import ConfigurationError

# Parameters that may be overridden from the launch command line.
OVERRIDABLE_PARAMETERS = (
    "host",
    "frame",
    "ned_frame",
    "trackers",
    "input_topic_template",
    "time_mode",
    "normalize_orientation",
)

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"Expected a boolean launch argument, got {value!r}")


def parameter_overrides(arguments: Mapping[str, str]) -> Dict[str, Any]:
    """
    Build the node parameter overrides from resolved launch arguments.

    Args:
        arguments: Launch argument name to its resolved string value

    Returns:
        Parameters for the arguments that were given a non-empty value.
        ``trackers`` is passed as a comma-separated string.
    """
    overrides: Dict[str, Any] = {}
    for name in OVERRIDABLE_PARAMETERS:
        value = arguments.get(name, "")
        if not value:
            continue
        if name == "normalize_orientation":
            overrides[name] = parse_bool(value)
        else:
            overrides[name] = value
    return overrides

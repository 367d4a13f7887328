"""
Topic and frame naming for tracked bodies.

Topic names use a sanitized form of the tracker name; frame ids keep the raw
name.
"""

import logging
from typing import List

from .errors import ConfigurationError
from .samples import HandlerIdentity

logger = logging.getLogger("naming")


def sanitize_name(name: str) -> str:
    """
    Make a tracker name safe for use in a ROS topic name.

    ASCII alphanumerics and '/' are kept, '_' is kept unless it is the first
    character, spaces become '_', and everything else is dropped.
    """
    chars = []
    for index, c in enumerate(name):
        if (c.isascii() and c.isalnum()) or c == "/":
            chars.append(c)
        elif c == "_" and index > 0:
            chars.append(c)
        elif c == " ":
            chars.append("_")
    return "".join(chars)


def parse_tracker_names(value) -> List[str]:
    """
    Read the tracker list from a parameter value.

    Accepts a list of names or a single comma-separated string. Blank entries
    and repeated names are dropped.
    """
    if isinstance(value, str):
        value = value.split(",")
    names = []
    for entry in value or []:
        entry = str(entry).strip()
        if entry and entry not in names:
            names.append(entry)
    return names


def session_key(name: str, host: str) -> str:
    """Key identifying one tracked body on one tracking server."""
    return f"{name}@{host}"


def build_identity(name: str, host: str) -> HandlerIdentity:
    """
    Derive topic names, child frames and the session key for a tracker.

    Raises:
        ConfigurationError: if nothing is left of the name after sanitizing
    """
    topic_name = sanitize_name(name)
    if not topic_name:
        raise ConfigurationError(f"Tracker name {name!r} yields an empty topic name")
    if topic_name != name:
        logger.debug(f"Tracker name {name!r} sanitized to {topic_name!r} for topics")

    return HandlerIdentity(
        name=name,
        topic_name=topic_name,
        enu_topic=f"{topic_name}_enu",
        ned_topic=f"{topic_name}_ned",
        child_frame=name,
        child_frame_ned=f"{name}_ned",
        session_key=session_key(name, host),
    )

"""Enumerations shared by request records."""

from __future__ import annotations

import enum


class AuthType(enum.IntEnum):
    """Account kind used to sign in."""

    DEVICE = 0
    GOOGLE = 1
    FACEBOOK = 2


class ClientPlatform(enum.IntEnum):
    """Platform reported in map update requests."""

    ANDROID = 0
    IOS = 1
    EDITOR = 2

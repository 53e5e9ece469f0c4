from __future__ import annotations

from enum import Enum


class Endpoint(str, Enum):
    PULVERIZE = "pulverize"
    BLACKHOLE = "blackhole"
    SHRED = "shred"
    BURN = "burn"
    VALIDATE_BEFORE_DESTROY = "validate-before-destroy"


KNOWN_ENDPOINTS = frozenset(item.value for item in Endpoint)

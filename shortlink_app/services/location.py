"""
Location resolvers using Strategy Pattern.

Clicks are tagged with a coarse region derived from the client address.
There is no geo database behind this: resolvers are placeholders that can
be swapped by configuration or replaced in tests.
"""

import hashlib
import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence

REGIONS = ("US", "IN", "UK", "CA", "AU", "DE", "FR", "JP")
UNKNOWN_LOCATION = "Unknown"


class LocationResolver(ABC):
    """Maps a client network address to a region tag"""

    @abstractmethod
    def resolve(self, client_address: Optional[str]) -> str:
        pass


class HashLocationResolver(LocationResolver):
    """
    Deterministic resolver: the same address always maps to the same region.
    """

    def __init__(self, regions: Sequence[str] = REGIONS):
        self.regions = tuple(regions)

    def resolve(self, client_address: Optional[str]) -> str:
        if not client_address:
            return UNKNOWN_LOCATION
        digest = hashlib.sha256(client_address.encode("utf-8")).digest()
        return self.regions[int.from_bytes(digest[:4], "big") % len(self.regions)]


class RandomLocationResolver(LocationResolver):
    """Picks a region at random (pass a seed for repeatable output)"""

    def __init__(self, regions: Sequence[str] = REGIONS, seed: Optional[int] = None):
        self.regions = tuple(regions)
        self.rng = random.Random(seed)

    def resolve(self, client_address: Optional[str]) -> str:
        return self.rng.choice(self.regions)


class StaticLocationResolver(LocationResolver):
    """Always returns the same tag"""

    def __init__(self, location: str = "US"):
        self.location = location

    def resolve(self, client_address: Optional[str]) -> str:
        return self.location


def create_location_resolver(name: str, static_location: str = "US") -> LocationResolver:
    """
    Build a resolver by configuration name.

    Raises:
        ValueError: If name is unknown
    """
    if name == "hash":
        return HashLocationResolver()
    if name == "random":
        return RandomLocationResolver()
    if name == "static":
        return StaticLocationResolver(static_location)
    raise ValueError(f"Unknown location resolver: {name}")

"""
Short code generation strategies for the code registry.
Uses Strategy Pattern to allow different generation algorithms.

Strategies never touch the registry directly: they get an `is_taken`
callback and are invoked while the registry holds its lock, so the
check-then-insert sequence is atomic.
"""

import string
import random
from abc import ABC, abstractmethod
from typing import Callable, Optional

from shortlink_app.exceptions import ShortcodeExhaustedError


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, sequence: int, is_taken: Callable[[str], bool]) -> str:
        """
        Generate a free short code.

        Args:
            sequence: Monotonic allocation counter of the registry
            is_taken: Returns True if a code is already registered

        Returns:
            A short code for which is_taken() returned False

        Raises:
            ShortcodeExhaustedError: If no free code was found
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Draws each character uniformly from [A-Za-z0-9] and retries on collision.

    With 62^6 codes a retry is rare; max_retries bounds the loop anyway.
    """

    def __init__(self, length: int = 6, max_retries: int = 10, rng: Optional[random.Random] = None):
        self.length = length
        self.max_retries = max_retries
        self.characters = string.ascii_letters + string.digits
        self.rng = rng or random.SystemRandom()

    def generate(self, sequence: int, is_taken: Callable[[str], bool]) -> str:
        """Generate random short code with collision checking"""
        for attempt in range(self.max_retries):
            short_code = self._generate_random_string()

            if not is_taken(short_code):
                return short_code

        raise ShortcodeExhaustedError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    def _generate_random_string(self) -> str:
        """Generate a random string of specified length"""
        return ''.join(self.rng.choice(self.characters) for _ in range(self.length))


class Base62ShortCodeStrategy(ShortCodeStrategy):
    """
    Base62 encoding strategy with ID obfuscation.
    Converts the registry's allocation counter to Base62 with a salt.

    Pros: No random collisions, fast
    Cons: Predictable if salt is known; may still hit a code that a
    client requested explicitly, so it skips forward on collision.
    """

    BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def __init__(self, salt: int = 916132832, length: int = 6, max_retries: int = 10):
        self.salt = salt
        self.length = length
        self.max_retries = max_retries

    def generate(self, sequence: int, is_taken: Callable[[str], bool]) -> str:
        """
        Generate short code using Base62 encoding.

        Process:
        1. Add salt to the sequence for obfuscation
        2. Encode to Base62 and left-pad to the configured length
        3. Step to the next number if the code is already registered

        A code longer than the configured length is never truncated
        (truncation would produce duplicates).
        """
        for offset in range(self.max_retries):
            obfuscated_id = sequence + offset + self.salt
            encoded = self._base62_encode(obfuscated_id)

            if len(encoded) > self.length:
                raise ShortcodeExhaustedError(
                    f"Generated code '{encoded}' exceeds length {self.length}. "
                    f"Sequence: {sequence}, Obfuscated ID: {obfuscated_id}. "
                    f"Consider a smaller salt or a longer code length."
                )

            short_code = encoded.rjust(self.length, self.BASE62_CHARS[0])
            if not is_taken(short_code):
                return short_code

        raise ShortcodeExhaustedError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    def _base62_encode(self, number: int) -> str:
        """
        Convert integer to Base62 string.

        Base62 uses: 0-9 (10) + a-z (26) + A-Z (26) = 62 characters
        """
        if number == 0:
            return self.BASE62_CHARS[0]

        result = ""
        while number > 0:
            result = self.BASE62_CHARS[number % 62] + result
            number //= 62

        return result

"""
PIN Credential Module

Verifies a low-entropy numeric PIN without keeping it in plaintext. Each
credential stores a random per-account salt and a check value derived from
the PIN and that salt.

The default "demo" scheme is a single fast SHA-256 pass and is NOT
cryptographically secure: a stolen account file can be brute-forced
offline in seconds. Deployments that care should select the "scrypt"
scheme, which plugs a memory-hard KDF in behind the same interface.
"""

import hashlib
import hmac
import re
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

from .exceptions import InvalidPin

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 12
SALT_BYTES = 16

RandomSource = Callable[[int], bytes]

_HEX = re.compile(r"[0-9a-fA-F]+")


class PinHasher(ABC):
    """Derives a hex check value from a PIN and a hex salt"""

    name: str = ""

    @abstractmethod
    def derive(self, pin: str, salt: str) -> str:
        """Return the check value for pin under salt"""
        pass


class DemoPinHasher(PinHasher):
    """Fast SHA-256 derivation (demo only, not a password hash)"""

    name = "demo"

    def derive(self, pin: str, salt: str) -> str:
        return hashlib.sha256((pin + salt).encode()).hexdigest()


class ScryptPinHasher(PinHasher):
    """Memory-hard scrypt derivation"""

    name = "scrypt"

    def __init__(self, n: int = 16384, r: int = 8, p: int = 1):
        self.n = n
        self.r = r
        self.p = p

    def derive(self, pin: str, salt: str) -> str:
        return hashlib.scrypt(
            pin.encode(),
            salt=bytes.fromhex(salt),
            n=self.n, r=self.r, p=self.p
        ).hex()


PIN_HASHERS: Dict[str, PinHasher] = {
    DemoPinHasher.name: DemoPinHasher(),
    ScryptPinHasher.name: ScryptPinHasher(),
}

DEFAULT_SCHEME = DemoPinHasher.name


def get_hasher(scheme: str) -> PinHasher:
    """Look up a registered PIN hasher by scheme name"""
    try:
        return PIN_HASHERS[scheme]
    except KeyError:
        raise ValueError(f"Unknown credential scheme: {scheme!r}")


def is_valid_pin(pin: str) -> bool:
    """Check the 4-12 ASCII decimal digit rule"""
    return (
        isinstance(pin, str)
        and PIN_MIN_LENGTH <= len(pin) <= PIN_MAX_LENGTH
        and pin.isascii()
        and pin.isdigit()
    )


def validate_pin(pin: str) -> str:
    """Return pin unchanged, or raise InvalidPin"""
    if not is_valid_pin(pin):
        raise InvalidPin(f"PIN must be {PIN_MIN_LENGTH}-{PIN_MAX_LENGTH} digits")
    return pin


@dataclass(frozen=True)
class Credential:
    """
    Salt and check value for one account's PIN.

    Stored and restored verbatim by the account file so previously set PINs
    keep verifying across restarts.
    """
    salt: str
    check_value: str
    scheme: str = DEFAULT_SCHEME

    def __post_init__(self):
        get_hasher(self.scheme)
        for field_name in ("salt", "check_value"):
            value = getattr(self, field_name)
            if not value or not _is_hex(value):
                raise ValueError(f"Credential {field_name} must be a non-empty hex string")

    @classmethod
    def create(cls, pin: str, random_source: RandomSource = secrets.token_bytes,
               scheme: str = DEFAULT_SCHEME) -> 'Credential':
        """
        Build a credential for a new PIN.

        Args:
            pin: Plaintext PIN, 4-12 decimal digits
            random_source: Callable returning n random bytes
            scheme: Registered PinHasher name

        Returns:
            New Credential with a fresh salt

        Raises:
            InvalidPin: If the PIN breaks the digit/length rule
        """
        validate_pin(pin)
        hasher = get_hasher(scheme)
        salt = random_source(SALT_BYTES).hex()
        return cls(salt=salt, check_value=hasher.derive(pin, salt), scheme=scheme)

    def verify(self, pin: str) -> bool:
        """Recompute the check value for pin and compare"""
        if not is_valid_pin(pin):
            return False
        expected = get_hasher(self.scheme).derive(pin, self.salt)
        return hmac.compare_digest(expected, self.check_value)


def _is_hex(value: str) -> bool:
    return (
        isinstance(value, str)
        and len(value) % 2 == 0
        and _HEX.fullmatch(value) is not None
    )

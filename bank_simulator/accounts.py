"""
Account Management Module

A single balance-bearing account: identity, owner name, balance in integer
minor units and a PIN credential. Balances only move through deposit and
withdraw, and can never go negative.
"""

import logging
import secrets
from typing import Optional

from .credentials import Credential, RandomSource, DEFAULT_SCHEME
from .currency import MAX_MINOR_UNITS
from .exceptions import InvalidAmount, InsufficientFunds

logger = logging.getLogger(__name__)


class Account:
    """
    Bank account owned by a Ledger.

    Use Account.open for new accounts and Account.restore when rebuilding
    one from persisted state.
    """
    
    def __init__(self, account_id: int, owner: str, credential: Credential, balance: int = 0):
        if isinstance(account_id, bool) or not isinstance(account_id, int) or account_id <= 0:
            raise ValueError(f"Account id must be a positive integer, got {account_id!r}")
        if not isinstance(owner, str):
            raise ValueError("Account owner must be a string")
        if not isinstance(credential, Credential):
            raise ValueError("Account credential must be a Credential")
        if isinstance(balance, bool) or not isinstance(balance, int):
            raise ValueError("Account balance must be an integer number of minor units")
        if balance < 0 or balance > MAX_MINOR_UNITS:
            raise ValueError(f"Account balance out of range: {balance}")
        
        self._id = account_id
        self._owner = owner
        self._credential = credential
        self._balance = balance
    
    @classmethod
    def open(cls, account_id: int, owner: str, pin: str,
             random_source: RandomSource = secrets.token_bytes,
             scheme: str = DEFAULT_SCHEME) -> 'Account':
        """
        Open a new zero-balance account
        
        Raises:
            InvalidPin: If the PIN is not 4-12 digits
        """
        credential = Credential.create(pin, random_source, scheme)
        return cls(account_id, owner, credential)
    
    @classmethod
    def restore(cls, account_id: int, owner: str, balance: int,
                credential: Credential) -> 'Account':
        """Rebuild a persisted account without touching its credential"""
        return cls(account_id, owner, credential, balance)
    
    @property
    def id(self) -> int:
        return self._id
    
    @property
    def owner(self) -> str:
        return self._owner
    
    @property
    def balance(self) -> int:
        """Current balance in minor units"""
        return self._balance
    
    @property
    def credential(self) -> Credential:
        return self._credential
    
    def verify_pin(self, pin: str) -> bool:
        """Check a PIN against the stored credential"""
        return self._credential.verify(pin)
    
    def set_pin(self, pin: str, random_source: RandomSource = secrets.token_bytes,
                scheme: Optional[str] = None) -> None:
        """
        Replace the PIN, generating a fresh salt
        
        Raises:
            InvalidPin: If the new PIN is not 4-12 digits
        """
        self._credential = Credential.create(
            pin, random_source, scheme or self._credential.scheme
        )
        logger.info("PIN changed for account %s", self._id)
    
    def deposit(self, amount: int) -> int:
        """
        Add funds to the account
        
        Args:
            amount: Minor units to add, must be positive
            
        Returns:
            New balance
            
        Raises:
            InvalidAmount: If amount is not positive or the balance would overflow
        """
        _require_positive(amount, "Deposit")
        if amount > MAX_MINOR_UNITS - self._balance:
            raise InvalidAmount("Deposit would exceed the maximum balance")
        
        self._balance += amount
        logger.debug("Deposit of %d to account %s", amount, self._id)
        return self._balance
    
    def withdraw(self, amount: int) -> int:
        """
        Remove funds from the account
        
        Args:
            amount: Minor units to remove, must be positive
            
        Returns:
            New balance
            
        Raises:
            InvalidAmount: If amount is not positive
            InsufficientFunds: If amount exceeds the balance
        """
        # Positivity before sufficiency
        _require_positive(amount, "Withdrawal")
        if amount > self._balance:
            raise InsufficientFunds("Insufficient funds")
        
        self._balance -= amount
        logger.debug("Withdrawal of %d from account %s", amount, self._id)
        return self._balance
    
    def __repr__(self) -> str:
        return f"Account(id={self._id!r}, owner={self._owner!r}, balance={self._balance!r})"


def _require_positive(amount: int, what: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{what} amount must be an integer number of minor units")
    if amount <= 0:
        raise InvalidAmount(f"{what} must be positive")

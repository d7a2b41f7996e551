"""
Ledger Module

The bank: owns every Account, hands out account ids and provides the
create / find / login / list operations the CLI shell drives.

Account ids are allocated from a counter that only moves forward. After a
load the counter is recomputed from the highest persisted id so ids are
never reused across restarts.
"""

import logging
import secrets
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .accounts import Account
from .credentials import RandomSource, DEFAULT_SCHEME, get_hasher

logger = logging.getLogger(__name__)

DEFAULT_ID_FLOOR = 1001


@dataclass(frozen=True)
class AccountSummary:
    """Read-only view of an account for listings"""
    id: int
    owner: str
    balance: int


class Ledger:
    """
    In-memory collection of accounts plus the next-id counter
    """
    
    def __init__(self, id_floor: int = DEFAULT_ID_FLOOR,
                 random_source: RandomSource = secrets.token_bytes,
                 credential_scheme: str = DEFAULT_SCHEME):
        if id_floor <= 0:
            raise ValueError("id_floor must be positive")
        
        self._accounts: List[Account] = []
        self._next_id = id_floor
        self.id_floor = id_floor
        self.random_source = random_source
        get_hasher(credential_scheme)
        self.credential_scheme = credential_scheme
        self._lock = threading.RLock()
    
    @classmethod
    def from_accounts(cls, accounts: Iterable[Account], id_floor: int = DEFAULT_ID_FLOOR,
                      **kwargs) -> 'Ledger':
        """
        Build a ledger around already-existing accounts
        
        Args:
            accounts: Accounts in their original insertion order
            id_floor: Counter value when there are no accounts
            
        Returns:
            Ledger whose next id is max(existing ids) + 1, or id_floor
            
        Raises:
            ValueError: If two accounts share an id
        """
        ledger = cls(id_floor=id_floor, **kwargs)
        seen = set()
        for account in accounts:
            if account.id in seen:
                raise ValueError(f"Duplicate account id {account.id}")
            seen.add(account.id)
            ledger._accounts.append(account)
        
        if seen:
            ledger._next_id = max(seen) + 1
        return ledger
    
    @property
    def next_id(self) -> int:
        """Id the next created account will receive"""
        return self._next_id
    
    def create_account(self, owner: str, pin: str) -> int:
        """
        Open a new account and return its id
        
        The id counter only advances once the account has been built, so a
        rejected PIN leaves it untouched.
        
        Raises:
            InvalidPin: If the PIN is not 4-12 digits
        """
        with self._lock:
            account_id = self._next_id
            account = Account.open(
                account_id, owner, pin,
                random_source=self.random_source,
                scheme=self.credential_scheme
            )
            self._accounts.append(account)
            self._next_id = account_id + 1
        
        logger.info("Account %s created", account_id)
        return account_id
    
    def find_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by id, or None"""
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None
    
    def login(self, account_id: int, pin: str) -> Optional[Account]:
        """
        Authenticate with id and PIN
        
        Returns None for an unknown id and for a wrong PIN alike.
        """
        account = self.find_by_id(account_id)
        if account is None or not account.verify_pin(pin):
            logger.warning("Login failed")
            return None
        
        logger.info("Login to account %s", account_id)
        return account
    
    def list_accounts(self) -> List[AccountSummary]:
        """Snapshot of (id, owner, balance) in insertion order"""
        with self._lock:
            return [AccountSummary(a.id, a.owner, a.balance) for a in self._accounts]
    
    def snapshot(self) -> List[Account]:
        """Accounts in insertion order, taken under the ledger lock"""
        with self._lock:
            return list(self._accounts)
    
    def __len__(self) -> int:
        return len(self._accounts)

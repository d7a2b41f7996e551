"""
Storage Backend Module

Persists the ledger's accounts to a tab-separated flat file, one account per
line:

    id<TAB>owner<TAB>balance<TAB>salt<TAB>check_value<TAB>scheme

Balances are integer minor units. Salt and check value are hex strings and
are written back exactly as read. Lines with only the first five fields are
accepted and use the demo credential scheme.
"""

import logging
import os
import re
import threading
from pathlib import Path
from typing import List, Optional, Union

from .accounts import Account
from .credentials import Credential, DEFAULT_SCHEME
from .exceptions import CorruptStore
from .ledger import Ledger, DEFAULT_ID_FLOOR
from .logging_config import log_action

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "\t"
RECORD_FIELDS = ("id", "owner", "balance", "salt", "check_value", "scheme")
LEGACY_FIELD_COUNT = 5

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_INTEGER = re.compile(r"-?[0-9]+")


def sanitize_owner(owner: str) -> str:
    """
    Make owner text safe for one UTF-8 record
    
    The delimiter, newlines and other control characters become spaces, and
    anything UTF-8 cannot encode (lone surrogates from undecodable input)
    becomes "?".
    """
    owner = owner.encode("utf-8", "replace").decode("utf-8")
    return _CONTROL_CHARS.sub(" ", owner)


def format_record(account: Account) -> str:
    """Serialize one account as a single line, without the newline"""
    credential = account.credential
    fields = [
        str(account.id),
        sanitize_owner(account.owner),
        str(account.balance),
        credential.salt,
        credential.check_value,
        credential.scheme,
    ]
    return FIELD_DELIMITER.join(fields)


def parse_record(line: str) -> Account:
    """
    Rebuild an account from one stored line
    
    Raises:
        ValueError: If the line is not a valid record
    """
    fields = line.split(FIELD_DELIMITER)
    if len(fields) == LEGACY_FIELD_COUNT:
        fields.append(DEFAULT_SCHEME)
    if len(fields) != len(RECORD_FIELDS):
        raise ValueError(
            f"expected {LEGACY_FIELD_COUNT} or {len(RECORD_FIELDS)} fields, got {len(fields)}"
        )
    
    id_text, owner, balance_text, salt, check_value, scheme = fields
    account_id = _parse_int(id_text, "id")
    balance = _parse_int(balance_text, "balance")
    credential = Credential(salt=salt, check_value=check_value, scheme=scheme)
    return Account.restore(account_id, owner, balance, credential)


def _parse_int(text: str, field_name: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"{field_name} is not an integer: {text!r}")
    return int(text)


class FlatFileStore:
    """Saves and loads a Ledger to a single tab-separated file"""
    
    def __init__(self, path: Union[str, Path], id_floor: int = DEFAULT_ID_FLOOR):
        self.path = Path(path)
        self.id_floor = id_floor
        self._lock = threading.Lock()
    
    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")
    
    def save(self, ledger: Ledger) -> int:
        """
        Write every account, replacing the previous file atomically
        
        The records are written to a sibling temp file which is then renamed
        over the target, so a crash mid-write leaves the old file intact.
        
        Returns:
            Number of records written
        """
        lines = [format_record(account) + "\n" for account in ledger.snapshot()]
        
        with self._lock:
            tmp_path = self.temp_path
            try:
                with open(tmp_path, "w", encoding="utf-8", newline="\n") as out:
                    out.writelines(lines)
                    out.flush()
                    os.fsync(out.fileno())
                os.replace(tmp_path, self.path)
            except (OSError, ValueError):
                logger.exception("Failed to save accounts to %s", self.path)
                if tmp_path.exists():
                    tmp_path.unlink()
                raise
        
        log_action(logger, "info", f"Saved {len(lines)} accounts",
                   action="save", resource=str(self.path))
        return len(lines)
    
    def load(self, **ledger_options) -> Ledger:
        """
        Read the account file into a new Ledger
        
        A missing file yields an empty ledger. Any malformed line aborts the
        whole load.
        
        Args:
            **ledger_options: Extra Ledger constructor arguments
            
        Raises:
            CorruptStore: If any record cannot be parsed
        """
        if not self.path.exists():
            logger.info("No account file at %s, starting empty", self.path)
            return Ledger(id_floor=self.id_floor, **ledger_options)
        
        accounts: List[Account] = []
        seen_ids = set()
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8", newline="") as src:
                    for line_number, raw in enumerate(src, start=1):
                        line = raw.rstrip("\r\n")
                        if not line.strip():
                            continue
                        try:
                            account = parse_record(line)
                        except ValueError as e:
                            raise self._corrupt(str(e), line_number) from e
                        if account.id in seen_ids:
                            raise self._corrupt(f"duplicate account id {account.id}", line_number)
                        seen_ids.add(account.id)
                        accounts.append(account)
            except UnicodeDecodeError as e:
                raise self._corrupt(f"not valid UTF-8 ({e.reason})") from e
        
        ledger = Ledger.from_accounts(accounts, id_floor=self.id_floor, **ledger_options)
        log_action(logger, "info", f"Loaded {len(accounts)} accounts",
                   action="load", resource=str(self.path),
                   extra={"next_id": ledger.next_id})
        return ledger
    
    def _corrupt(self, message: str, line_number: Optional[int] = None) -> CorruptStore:
        logger.error("Corrupt account file %s line %s: %s", self.path, line_number, message)
        return CorruptStore(message, path=self.path, line_number=line_number)


def save(ledger: Ledger, path: Union[str, Path]) -> int:
    """Save ledger to path"""
    return FlatFileStore(path).save(ledger)


def load(path: Union[str, Path], id_floor: int = DEFAULT_ID_FLOOR, **ledger_options) -> Ledger:
    """Load a ledger from path; a missing file gives an empty ledger"""
    return FlatFileStore(path, id_floor=id_floor).load(**ledger_options)

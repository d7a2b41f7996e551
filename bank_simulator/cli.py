"""
Interactive Command-Line Shell

Numeric menu loop over a Ledger. Loads the account file at startup, saves it
on exit, and turns every ledger error into a message followed by a
re-prompt. All I/O goes through injectable input/output callables.
"""

import argparse
import sys
from typing import Callable, List, Optional

from pydantic import ValidationError

from .accounts import Account
from .config import get_config
from .currency import Currency, format_amount, parse_amount
from .exceptions import BankError, CorruptStore, InvalidAmount
from .ledger import Ledger
from .logging_config import setup_logging
from .storage import FlatFileStore

MAIN_MENU = (
    "\nMain Menu:\n"
    " 1) Create account\n"
    " 2) Login\n"
    " 3) List accounts (demo)\n"
    " 4) Exit"
)

ACCOUNT_MENU = (
    "\n[Account {id}] Options:\n"
    " 1) Check balance\n"
    " 2) Deposit\n"
    " 3) Withdraw\n"
    " 4) Change PIN\n"
    " 5) Logout"
)


class BankShell:
    """Menu-driven session over one ledger"""
    
    def __init__(self, ledger: Ledger, store: Optional[FlatFileStore] = None,
                 input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print,
                 autosave: bool = False, currency: Currency = Currency.USD):
        self.ledger = ledger
        self.store = store
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.autosave = autosave
        self.currency = currency
    
    def say(self, message: str) -> None:
        self.output_fn(message)
    
    def prompt(self, message: str) -> str:
        return self.input_fn(message)
    
    def prompt_int(self, message: str) -> int:
        """Prompt until the reply is an integer"""
        while True:
            reply = self.prompt(message)
            try:
                return int(reply.strip())
            except ValueError:
                self.say("Invalid number. Try again.")
    
    def prompt_amount(self, message: str) -> int:
        """Prompt until the reply parses as an amount"""
        while True:
            reply = self.prompt(message)
            try:
                return parse_amount(reply, self.currency)
            except InvalidAmount as e:
                self.say(f"Invalid amount: {e}. Try again.")
    
    def money(self, minor_units: int) -> str:
        return format_amount(minor_units, self.currency)
    
    def run(self) -> bool:
        """
        Run the main menu until Exit or end of input
        
        Returns:
            True if the ledger was saved (or there is no store)
        """
        self.say("=== Bank Account Simulator ===")
        try:
            while True:
                self.say(MAIN_MENU)
                choice = self.prompt_int("Choose: ")
                if choice == 1:
                    self.create_account()
                elif choice == 2:
                    self.login()
                elif choice == 3:
                    self.list_accounts()
                elif choice == 4:
                    break
                else:
                    self.say("Invalid choice.")
        except EOFError:
            self.say("")
        
        saved = self.save()
        self.say("Goodbye!")
        return saved
    
    def create_account(self) -> Optional[int]:
        owner = self.prompt("Owner name: ")
        pin = self.prompt("Choose PIN (4-12 digits): ")
        try:
            account_id = self.ledger.create_account(owner, pin)
        except BankError as e:
            self.say(f"Failed to create account: {e}")
            return None
        
        self.say(f"Account created! Your ID is: {account_id}")
        self._autosave()
        return account_id
    
    def login(self) -> Optional[Account]:
        account_id = self.prompt_int("Account ID: ")
        pin = self.prompt("PIN: ")
        account = self.ledger.login(account_id, pin)
        if account is None:
            self.say("Login failed. Check ID/PIN.")
            return None
        
        self.account_session(account)
        return account
    
    def list_accounts(self) -> None:
        self.say("\n=== Accounts (for demo) ===")
        summaries = self.ledger.list_accounts()
        for summary in summaries:
            self.say(f"ID: {summary.id}, Owner: {summary.owner}, "
                     f"Balance: {self.money(summary.balance)}")
        if not summaries:
            self.say("(none)")
    
    def account_session(self, account: Account) -> None:
        """Account menu loop for a logged-in account"""
        while True:
            self.say(ACCOUNT_MENU.format(id=account.id))
            choice = self.prompt_int("Choose: ")
            try:
                if choice == 1:
                    self.say(f"Balance: {self.money(account.balance)}")
                elif choice == 2:
                    amount = self.prompt_amount("Amount to deposit (e.g., 100 or 12.34): ")
                    account.deposit(amount)
                    self.say(f"Deposited. New balance: {self.money(account.balance)}")
                    self._autosave()
                elif choice == 3:
                    amount = self.prompt_amount("Amount to withdraw: ")
                    account.withdraw(amount)
                    self.say(f"Withdrawn. New balance: {self.money(account.balance)}")
                    self._autosave()
                elif choice == 4:
                    account.set_pin(self.prompt("New PIN (4-12 digits): "))
                    self.say("PIN changed.")
                    self._autosave()
                elif choice == 5:
                    self.say("Logging out...")
                    return
                else:
                    self.say("Invalid option.")
            except BankError as e:
                self.say(f"Error: {e}")
    
    def save(self) -> bool:
        if self.store is None:
            return True
        try:
            self.store.save(self.ledger)
        except (OSError, ValueError) as e:
            self.say(f"Failed to save accounts: {e}")
            return False
        return True
    
    def _autosave(self) -> None:
        if self.autosave:
            self.save()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bank-simulator",
        description="Bank Account Simulator - PIN-protected demo accounts",
    )
    parser.add_argument(
        "--data-file",
        default=None,
        help="Account file to load and save (default: BANK_SIM_DATA_FILE or accounts.tsv)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: BANK_SIM_LOG_LEVEL or warning)",
    )
    return parser


def main(argv: Optional[List[str]] = None,
         input_fn: Callable[[str], str] = input,
         output_fn: Callable[[str], None] = print) -> int:
    """Entry point for the bank-simulator command"""
    args = build_parser().parse_args(argv)
    try:
        config = get_config()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    
    setup_logging(
        level=args.log_level or config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
    )
    
    store = FlatFileStore(args.data_file or config.data_file, id_floor=config.id_floor)
    try:
        ledger = store.load(credential_scheme=config.credential_scheme)
    except CorruptStore as e:
        print(f"Cannot start: {e}", file=sys.stderr)
        return 2
    
    shell = BankShell(
        ledger, store,
        input_fn=input_fn,
        output_fn=output_fn,
        autosave=config.autosave,
        currency=Currency.from_code(config.currency),
    )
    return 0 if shell.run() else 1


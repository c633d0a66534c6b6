"""
Login domain service - Credential check and session issuance.

An unknown email and a wrong password raise the same InvalidCredentials
error, and both paths run one bcrypt comparison, so callers cannot tell
which accounts exist. Professionals are gated on having completed their
profile before the password is judged; the comparison still runs first
so the gate costs the same time as every other path.
"""

from dataclasses import dataclass

from .exceptions import InvalidCredentials, ProfileIncomplete
from .models import AuthResult, Role, normalize_email
from .ports import AccountRepository, PasswordHasher, TokenIssuer


@dataclass
class LoginService:
    """Domain service for password login."""

    accounts: AccountRepository
    hasher: PasswordHasher
    tokens: TokenIssuer

    def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate by email and password.

        Raises:
            InvalidCredentials: If the account is unknown or the password is wrong
            ProfileIncomplete: If a professional has not completed the profile
        """
        account = self.accounts.find_by_email(normalize_email(email))
        if account is None:
            self.hasher.verify(password, None)
            raise InvalidCredentials()

        password_ok = self.hasher.verify(password, account.password_hash)

        if account.role is Role.PROFESSIONAL and not account.profile_completed:
            raise ProfileIncomplete(account.id)

        if not password_ok:
            raise InvalidCredentials()

        return AuthResult(account=account, token=self.tokens.issue(account.id, account.role))

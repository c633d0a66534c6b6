"""
Registration domain service - Professional onboarding state machine.

This module contains the account onboarding flows of the marketplace:
the multi-step professional flow and the single-step customer flow.

Professional State Machine
==========================

States (per normalized email):
- NoRegistration: nothing known about the email
- EmailRegistered: pending registration holds name and password hash
- PhoneBound: an OTP was issued and delivered for the bound phone
- Persisted: durable professional account exists (profile incomplete)

Transitions:
    NoRegistration  -> EmailRegistered  register_professional()
    EmailRegistered -> PhoneBound       send_otp()
    PhoneBound      -> Persisted        verify_otp()
    Persisted       -> (profile done)   complete_profile()

A failed step leaves the state unchanged so the client can retry.
Promotion to a durable account happens only in verify_otp(), which
consumes the pending registration under the email's lock so that it can
run at most once per registration.

Customers skip all transient state: register_customer() creates the
account with a completed profile and returns a session token.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .exceptions import (
    AccountNotFound,
    DependencyError,
    EmailTaken,
    InvalidOrExpiredOtp,
    NoEmailStep,
    NotifyFailed,
    ServiceCreationFailed,
)
from .locks import KeyedLock
from .models import (
    Account,
    AuthResult,
    Coordinates,
    NewAccount,
    Role,
    ServiceOffer,
    normalize_email,
)
from .otp import OtpStore
from .pending import PendingRegistrationStore
from .ports import AccountRepository, Notifier, PasswordHasher, TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for account onboarding.

    Orchestrates the pending-registration store, the OTP store, the
    notifier and the account repository into the registration flows.
    """

    accounts: AccountRepository
    notifier: Notifier
    otp_store: OtpStore
    pending_store: PendingRegistrationStore
    hasher: PasswordHasher
    tokens: TokenIssuer
    sender_name: str = "CraftConnect"
    _profile_locks: KeyedLock = field(default_factory=KeyedLock, init=False, repr=False)

    def register_professional(self, name: str, email: str, password: str) -> str:
        """
        Record the email step of a professional sign-up.

        No account is created yet; the registration waits for phone
        verification in the pending store.

        Returns:
            Normalized email address

        Raises:
            EmailTaken: If an account already exists for the email
            RegistrationPending: If a pending registration exists and the
                store rejects replacing it
        """
        normalized_email = normalize_email(email)
        if self.accounts.find_by_email(normalized_email) is not None:
            raise EmailTaken(normalized_email)

        password_hash = self.hasher.hash(password)
        self.pending_store.begin(normalized_email, name.strip(), password_hash)
        logger.info("Pending professional registration for %s", normalized_email)
        return normalized_email

    def send_otp(self, email: str, phone: str) -> int:
        """
        Issue an OTP for phone and deliver it.

        If delivery fails the challenge stays live until it expires; a new
        code cannot be issued for the phone before then.

        Returns:
            Seconds until the issued code expires

        Raises:
            NoEmailStep: If the email step was never completed
            OtpAlreadyPending: If a live code already exists for phone
            NotifyFailed: If the notifier could not deliver the code
        """
        normalized_email = normalize_email(email)
        if self.pending_store.get(normalized_email) is None:
            raise NoEmailStep(normalized_email)

        challenge = self.otp_store.issue(phone)
        message = f"Your OTP for {self.sender_name} is: {challenge.code}"
        try:
            self.notifier.send(phone, message)
        except Exception as exc:
            logger.warning("OTP delivery to %s failed: %s", phone, exc)
            raise NotifyFailed(phone) from exc

        self.pending_store.bind_phone(normalized_email, phone)
        logger.info("OTP issued for %s", normalized_email)
        return self.otp_store.ttl_seconds

    def verify_otp(self, email: str, code: str | int) -> AuthResult:
        """
        Verify the OTP and promote the pending registration to an account.

        The pending registration is taken out of the store before the
        account is written. If the write fails the registration is put
        back, but the code has been used and a new one must be requested.

        Raises:
            InvalidOrExpiredOtp: If nothing is pending, no phone is bound,
                or the code is wrong, expired or already used, or an
                account for the email appeared in the meantime
            RepositoryError: If the account could not be persisted
        """
        normalized_email = normalize_email(email)

        with self.pending_store.locked(normalized_email):
            pending = self.pending_store.get(normalized_email)
            if pending is None or pending.phone is None:
                raise InvalidOrExpiredOtp(normalized_email)
            self.otp_store.verify(pending.phone, code)
            pending = self.pending_store.take(normalized_email)

        try:
            account = self.accounts.create_account(
                NewAccount(
                    name=pending.name,
                    email=pending.email,
                    password_hash=pending.password_hash,
                    role=Role.PROFESSIONAL,
                    profile_completed=False,
                    phone=pending.phone,
                )
            )
        except EmailTaken as exc:
            logger.warning(
                "Account for %s appeared during verification; pending registration dropped",
                pending.email,
            )
            raise InvalidOrExpiredOtp(pending.email) from exc
        except DependencyError:
            self.pending_store.restore(pending)
            raise

        logger.info("Professional account %s created for %s", account.id, account.email)
        return AuthResult(account=account, token=self.tokens.issue(account.id, account.role))

    def complete_profile(
        self,
        account_id: str,
        address: str,
        coordinates: Coordinates,
        services_offered: Sequence[ServiceOffer],
    ) -> Account:
        """
        Attach address, location and offered services to an account.

        Services are created in the submitted order. If one fails, the
        ones already created are deleted and the account is left as it
        was. Completing an already completed profile returns the account
        unchanged.

        Raises:
            AccountNotFound: If account_id does not exist
            ServiceCreationFailed: If a service could not be created
            RepositoryError: If the account update failed
        """
        with self._profile_locks.hold(account_id):
            account = self.accounts.find_by_id(account_id)
            if account is None:
                raise AccountNotFound(account_id)
            if account.profile_completed:
                logger.info("Profile for %s already completed", account_id)
                return account

            service_ids: list[str] = []
            try:
                for offer in services_offered:
                    service_ids.append(self.accounts.create_service(account_id, offer).id)
            except DependencyError as exc:
                logger.warning(
                    "Service creation failed for %s after %d service(s)",
                    account_id,
                    len(service_ids),
                )
                self._discard_services(service_ids)
                raise ServiceCreationFailed(account_id) from exc

            try:
                updated = self.accounts.complete_profile(
                    account_id, address.strip(), coordinates, service_ids
                )
            except DependencyError:
                self._discard_services(service_ids)
                raise
            if updated is None:
                self._discard_services(service_ids)
                raise AccountNotFound(account_id)

        logger.info("Profile completed for %s with %d service(s)", account_id, len(service_ids))
        return updated

    def register_customer(self, name: str, email: str, password: str) -> AuthResult:
        """
        Create a customer account in one step.

        Raises:
            EmailTaken: If an account already exists for the email
        """
        normalized_email = normalize_email(email)
        if self.accounts.find_by_email(normalized_email) is not None:
            raise EmailTaken(normalized_email)

        account = self.accounts.create_account(
            NewAccount(
                name=name.strip(),
                email=normalized_email,
                password_hash=self.hasher.hash(password),
                role=Role.CUSTOMER,
                profile_completed=True,
            )
        )
        logger.info("Customer account %s created for %s", account.id, account.email)
        return AuthResult(account=account, token=self.tokens.issue(account.id, account.role))

    def _discard_services(self, service_ids: Sequence[str]) -> None:
        if not service_ids:
            return
        try:
            self.accounts.delete_services(service_ids)
        except DependencyError:
            logger.exception("Could not delete orphaned services %s", list(service_ids))

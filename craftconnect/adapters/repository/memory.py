"""
In-memory repository adapter - Implements AccountRepository protocol.

Thread-safe, process-local storage for development runs and tests that
do not need PostgreSQL. Returned objects are copies so callers cannot
mutate stored state behind the repository's back.
"""

import copy
import threading
import uuid
from collections.abc import Sequence

from craftconnect.domain.exceptions import EmailTaken
from craftconnect.domain.models import Account, Coordinates, NewAccount, Service, ServiceOffer


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with dictionaries.

    Uses structural subtyping - no explicit inheritance from Protocol.

    services_for() is not part of the protocol; tests use it to inspect
    which services a profile completion left behind.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, Account] = {}
        self._ids_by_email: dict[str, str] = {}
        self._services: dict[str, Service] = {}

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account_id = self._ids_by_email.get(email)
            if account_id is None:
                return None
            return copy.deepcopy(self._accounts[account_id])

    def find_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return copy.deepcopy(account) if account is not None else None

    def create_account(self, account: NewAccount) -> Account:
        with self._lock:
            if account.email in self._ids_by_email:
                raise EmailTaken(account.email)
            stored = Account(
                id=str(uuid.uuid4()),
                name=account.name,
                email=account.email,
                password_hash=account.password_hash,
                role=account.role,
                profile_completed=account.profile_completed,
                phone=account.phone,
            )
            self._accounts[stored.id] = stored
            self._ids_by_email[stored.email] = stored.id
            return copy.deepcopy(stored)

    def create_service(self, professional_id: str, offer: ServiceOffer) -> Service:
        service = Service(
            id=str(uuid.uuid4()),
            name=offer.name,
            type=offer.type,
            rate=offer.rate,
            description=offer.description,
            professional_id=professional_id,
        )
        with self._lock:
            self._services[service.id] = service
        return service

    def delete_services(self, service_ids: Sequence[str]) -> None:
        with self._lock:
            for service_id in service_ids:
                self._services.pop(service_id, None)

    def complete_profile(
        self,
        account_id: str,
        address: str,
        location: Coordinates,
        service_ids: Sequence[str],
    ) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            account.address = address
            account.location = location
            account.services_offered = list(service_ids)
            account.profile_completed = True
            return copy.deepcopy(account)

    def ping(self) -> None:
        return None

    def services_for(self, professional_id: str) -> list[Service]:
        """Services owned by professional_id, in creation order."""
        with self._lock:
            return [s for s in self._services.values() if s.professional_id == professional_id]

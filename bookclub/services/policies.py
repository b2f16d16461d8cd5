"""Reactive policies.

Policies never call each other. They load an aggregate, run one command,
save it and dispatch whatever it recorded, so the next policy in the chain
is triggered by an event.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bookclub.domain import LeanpubInvoiceId, Purchase
from bookclub.domain.events import (
    AccessWasGrantedToMember,
    DomainEvent,
    MemberRequestedAccess,
    PurchaseWasClaimed,
    PurchaseWasImported,
)
from bookclub.services.collaborators import Clock
from bookclub.services.dispatcher import EventDispatcher
from bookclub.stores.interfaces import MemberRepository, PurchaseRepository

if TYPE_CHECKING:
    from bookclub.services.application import Application

logger = logging.getLogger(__name__)


class AccessPolicy:
    """Grants access to members who request it with the invoice ID of a real purchase."""

    def __init__(
        self,
        purchase_repository: PurchaseRepository,
        member_repository: MemberRepository,
        dispatcher: EventDispatcher,
        clock: Clock,
    ) -> None:
        self._purchase_repository = purchase_repository
        self._member_repository = member_repository
        self._dispatcher = dispatcher
        self._clock = clock

    def handle(self, event: DomainEvent) -> None:
        match event:
            case MemberRequestedAccess():
                self.when_member_requested_access(event)
            case PurchaseWasImported():
                self.when_purchase_was_imported(event)
            case PurchaseWasClaimed():
                self.when_purchase_was_claimed(event)
            case _:
                raise TypeError(f"AccessPolicy does not handle {event.kind}")

    def when_member_requested_access(self, event: MemberRequestedAccess) -> None:
        if not self._purchase_repository.exists(event.member_id):
            logger.debug("No purchase found for %s yet, access stays pending", event.member_id)
            return

        purchase = self._purchase_repository.get_by_id(event.member_id)
        if purchase.was_claimed:
            logger.info("Purchase %s was already claimed, access stays pending", event.member_id)
            return

        self._claim(purchase, event.member_id)

    def when_purchase_was_imported(self, event: PurchaseWasImported) -> None:
        """Grants access to a member who asked for it before the purchase was imported."""
        if not self._member_repository.exists(event.purchase_id):
            return

        member = self._member_repository.get_by_id(event.purchase_id)
        if member.was_granted_access:
            return

        purchase = self._purchase_repository.get_by_id(event.purchase_id)
        if purchase.was_claimed:
            return

        logger.info("Purchase %s was imported for a pending member", event.purchase_id)
        self._claim(purchase, member.member_id)

    def _claim(self, purchase: Purchase, member_id: LeanpubInvoiceId) -> None:
        purchase.claim(member_id, claimed_at=self._clock.now())
        self._purchase_repository.save(purchase)
        self._dispatcher.dispatch_all(purchase.release_events())

    def when_purchase_was_claimed(self, event: PurchaseWasClaimed) -> None:
        member = self._member_repository.get_by_id(event.member_id)
        member.grant_access()
        self._member_repository.save(member)
        logger.info("Granted access to member %s", event.member_id)
        self._dispatcher.dispatch_all(member.release_events())


class GenerateAccessToken:
    def __init__(self, application: Application) -> None:
        self._application = application

    def handle(self, event: DomainEvent) -> None:
        match event:
            case AccessWasGrantedToMember():
                self.when_access_was_granted_to_member(event)
            case _:
                raise TypeError(f"GenerateAccessToken does not handle {event.kind}")

    def when_access_was_granted_to_member(self, event: AccessWasGrantedToMember) -> None:
        self._application.generate_access_token(event.member_id.value)

"""Test factories for generating request payloads."""

from tests.factories.ticket import MemberPayloadFactory, TicketPayloadFactory


__all__ = [
    "MemberPayloadFactory",
    "TicketPayloadFactory",
]

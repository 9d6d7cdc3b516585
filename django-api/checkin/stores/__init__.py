from checkin.stores.interfaces import AuthorizationDirectory, TicketStore

__all__ = [
    "AuthorizationDirectory",
    "TicketStore",
]

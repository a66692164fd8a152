"""Ticket lifecycle services used by handlers.

Handlers load the registry lazily so the wallet client is only built when a
ticket route is actually hit.
"""

# Do NOT import services here - use lazy loading in handlers instead

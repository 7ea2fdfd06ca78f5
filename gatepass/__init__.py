"""gatepass - visitor invitations and guard check-in for multi-tenant sites."""

__version__ = "0.1.0"

"""RepairDesk - multi-tenant repair shop backend."""

__version__ = "0.1.0"

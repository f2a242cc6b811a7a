"""Clients and stand-ins for the external contract services."""

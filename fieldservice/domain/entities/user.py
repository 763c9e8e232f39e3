"""User entity — a customer who raises tickets."""

from dataclasses import dataclass


@dataclass
class User:
    email: str
    name: str
    phone: str | None = None
    address: str | None = None
    pincode: str | None = None

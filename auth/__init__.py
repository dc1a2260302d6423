"""Credential checks and route gating for the dashboard."""

from auth.gate import GateDecision, authorize_request
from auth.passwords import hash_password, verify_password
from auth.provider import CredentialsProvider

__all__ = [
    "CredentialsProvider",
    "GateDecision",
    "authorize_request",
    "hash_password",
    "verify_password",
]

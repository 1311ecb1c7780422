"""
Real HTTP integration clients.

These clients communicate with a running QKart backend over HTTP
(default `http://localhost:8082/api/v1`).

Important:
- Must implement the same interface as the in-memory client
- Must return payloads shaped according to qkart/integrations/contracts/*
"""

from .qkart_backend import HttpStorefrontBackend

__all__ = ["HttpStorefrontBackend"]

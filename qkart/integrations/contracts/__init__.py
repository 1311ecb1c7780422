"""
Contracts (data models).

This folder defines the request/response shapes for the QKart backend.
Examples:
- Product and cart line formats
- Address and login envelopes
- The backend client interface shared by the HTTP and in-memory clients

Why this exists:
- Ensures consistent data structures across mock and real clients
- Keeps wire field names (`_id`, `productId`, `qty`) out of page logic

Both mock and real HTTP clients should use these contracts.
"""

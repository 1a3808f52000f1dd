"""Domain-level values shared by the marketplace services.

This package contains the types that describe *who* an operation acts on,
independent from *where* they are persisted (services, repositories, etc.).
"""

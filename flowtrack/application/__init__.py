"""Application layer: interfaces, services, use cases.

Services and DTOs depend only on domain and protocol definitions; the flow
client is the composition root that wires in the SQL storage by default.
"""

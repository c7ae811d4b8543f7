"""Application layer: interfaces and use cases.

Depends only on domain and protocol definitions. Infrastructure
implements the interfaces (repositories).
"""

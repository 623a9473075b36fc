"""
Per-domain repository modules for database access.

Repositories own queries and row mutations; routers own request validation,
permission checks and the HTTP errors that follow from them.
"""

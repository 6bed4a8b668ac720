"""Attributes bounded context.

Read side of the canonical attribute store. Attributes are created, updated
and deleted by the attribute CRUD API; this context only reads them.
"""

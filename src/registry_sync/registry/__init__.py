"""Registry bounded context.

Keeps the external attribute registry in line with the attribute store:
one attribute group per attribute, created, updated, tagged and deleted by
an idempotent reconcile.
"""

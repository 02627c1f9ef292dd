"""Domain layer for posledger: entities, errors and ledger services.

Services are imported from their modules (``posledger.domain.journal`` and
so on) so that the database layer can import entities without a cycle.
"""

"""Domain layer for ledgerpost: entities, errors and the posting engine."""

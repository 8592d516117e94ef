"""
Minting job processing.

Components:
- mint_worker.services.minting.core - run loop, executor, recorder, reporter
- mint_worker.services.minting.database - job store access
- mint_worker.services.minting.transactions - transaction submitters
"""

"""
Service layer for the minting worker.
"""

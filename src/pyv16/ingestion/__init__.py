"""Ingestion layer.

Turns raw feed bodies into normalized :class:`~pyv16.models.BeaconRecord`
batches. Only the state layer keeps them.
"""

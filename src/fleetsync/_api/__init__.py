"""Endpoint modules for the fleet backend's REST surface.

Internal to fleetsync; `fleetsync.fetcher.SnapshotFetcher` is the public entry point.
"""

"""Snapshot engine.

This package holds the pure logic that turns live browser state into a
snapshot, merges fresh captures into a previously persisted snapshot,
replays a snapshot into the browser and classifies live/saved pairs by
sync status.  Store and browser I/O is the client's job.
"""

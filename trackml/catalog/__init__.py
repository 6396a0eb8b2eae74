"""Async client and view state for the TrackML model catalog."""

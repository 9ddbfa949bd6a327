"""Parking-space store backends."""

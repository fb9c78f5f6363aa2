"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested with stub collaborators; retry tests never
block because the sleep function is injected.
"""

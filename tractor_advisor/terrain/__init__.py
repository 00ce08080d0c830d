"""Terrain analysis: slope/soil/altitude bands and requirement factors."""

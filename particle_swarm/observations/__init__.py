"""Observation tools: plots of how a run unfolded."""

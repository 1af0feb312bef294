"""Maze visitor navigation: waypoint following, afflictions, and detour behaviour."""

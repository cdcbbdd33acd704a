"""
Step dispatch module.

Maps the current application state to one of the step views, mounts it on
the render surface and owns the per-step resources (animations, game session).
"""

"""
Controller layer: edit operations, raster import, input routing and the
step scheduler. Pure Python, no Qt imports.
"""

"""
Boundary layer: persistence and nearest-neighbour adapters.
"""

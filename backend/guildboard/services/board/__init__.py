"""
Board: the per-room availability grid, its week keys, bot command text and schema upgrades.
"""

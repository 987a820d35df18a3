"""
Overlap view: maximal availability blocks per day and the all-free hour count.
- Recomputed on every read from the room blob; nothing here is persisted.
"""
from guildboard.services.aggregation.blocks import build_overlap, compute_blocks, count_all_free_hours

__all__ = ["build_overlap", "compute_blocks", "count_all_free_hours"]

"""Pre-aggregation of Timing activity exports into dashboard tables."""

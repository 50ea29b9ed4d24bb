"""Learning plans with saved per-grade, per-subject progress."""

"""error_scout.crawler: scope policy, frontier, page visits and event correlation."""

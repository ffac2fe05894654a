"""Core rule and policy logic, free of any CLI or engine concerns."""

"""Auto-mapping: field models, name matching strategies and the scoring engine."""

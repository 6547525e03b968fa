"""
Record Builder Module

Builds target records from source records:
- Nested path access with bracket indexes (path_accessor)
- ${...} template rendering (template_engine)
- Field mapping execution with per-field error isolation (transform_engine)
"""

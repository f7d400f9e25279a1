"""Template specialization: binding model, validation, substitution, merging."""

"""Domain layer: type-spec data model, checker registry, undot transforms."""

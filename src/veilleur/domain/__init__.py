"""Domain layer: entities, value objects, exceptions, service interfaces."""

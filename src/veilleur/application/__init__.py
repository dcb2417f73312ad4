"""Application layer: tracking services, use cases, tracker facade."""

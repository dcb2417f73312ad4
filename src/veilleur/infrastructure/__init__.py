"""Infrastructure adapters: GraphQL clients, monitoring."""

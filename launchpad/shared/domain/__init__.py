"""Business logic: entities, repositories and use cases."""

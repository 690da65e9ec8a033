"""Host surfaces for the engine: REST API and terminal game."""

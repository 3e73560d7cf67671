"""Infrastructure layer for the flashcard generator."""

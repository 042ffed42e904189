"""quickstudy: topic-driven study sessions (quiz, flashcards, comic, brief, games) over FastAPI."""

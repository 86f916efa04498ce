"""OpenStory backend - per-game AI conversations with resumable history."""

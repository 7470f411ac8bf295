"""Find YouTube videos that discuss a selected Clash Royale deck."""

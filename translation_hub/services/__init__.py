"""Application services: sessions, translation history, AI proxy, languages and cleanup."""

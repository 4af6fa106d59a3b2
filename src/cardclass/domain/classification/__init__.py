"""Classification domain: rule matching, prompting and AI fallback."""

"""Review submission service with media uploads and bearer-token auth."""

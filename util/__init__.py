"""Path resolution and SSE transport helpers."""

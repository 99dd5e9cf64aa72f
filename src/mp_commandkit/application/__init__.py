"""Application layer – resolution, middleware pipeline, plugins and analytics."""

from upwatch.app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]

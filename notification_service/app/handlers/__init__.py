from .queue_handler import handle_queue_event, lambda_handler

__all__ = ["handle_queue_event", "lambda_handler"]

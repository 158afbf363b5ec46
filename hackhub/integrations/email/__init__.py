from .sender import send_templated_email

__all__ = ["send_templated_email"]

"""Species catalog web application."""

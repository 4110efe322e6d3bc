"""Room chat API: Flask application over MongoDB."""

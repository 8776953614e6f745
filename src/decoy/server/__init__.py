"""Gateway glue: ASGI translation, gateway adapters and server lifecycle."""

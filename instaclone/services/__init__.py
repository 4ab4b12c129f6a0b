"""Domain services: one class per concern, constructed per request with a Session."""

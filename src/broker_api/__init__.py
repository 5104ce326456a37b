"""REST API for the payment broker."""

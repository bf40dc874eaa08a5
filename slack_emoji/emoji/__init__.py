"""Emoji records, the remote emoji index and the reserved shortcode set."""

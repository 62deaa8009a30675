"""Entry points for the scripts exposed to the user."""

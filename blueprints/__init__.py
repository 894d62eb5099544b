"""HTTP blueprints of the ShareIt service."""

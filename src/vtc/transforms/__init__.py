"""Built-in node and directive transforms."""

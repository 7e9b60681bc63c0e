"""Result log adapters."""

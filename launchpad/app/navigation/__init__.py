"""Navigation state machine and route redirection."""

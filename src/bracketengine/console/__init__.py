"""Terminal front end for running tournaments."""

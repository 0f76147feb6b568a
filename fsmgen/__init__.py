"""fsmgen: validate finite state machine graphs and generate run-to-completion machines."""

__version__ = "0.1.0"

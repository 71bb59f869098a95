"""Application layer: navigation, startup and the Flet shell."""

"""Transform configurations and the pure transform handlers."""

"""Qt widgets for the Image Finalizer window."""

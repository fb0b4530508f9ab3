"""Report functions: one vendor request in, markdown out."""

"""Core ranking, discovery and VCS building blocks for px."""

"""Terminal pickers for Codefresh builds and pipelines."""

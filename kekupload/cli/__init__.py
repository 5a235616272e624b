"""KekUpload command line interface."""

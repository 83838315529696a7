# Command-line tools for the spectral enhancement pipeline

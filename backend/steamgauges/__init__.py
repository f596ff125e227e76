"""Client facade and status API for steamgaug.es."""

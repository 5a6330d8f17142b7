"""Color conversion, gamut clipping and light-state building for color lights."""

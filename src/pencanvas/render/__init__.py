"""Canvas session over the Pillow raster engine."""

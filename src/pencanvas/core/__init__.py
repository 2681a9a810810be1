"""Value types shared by the canvas: geometry, colours and errors."""

"""lsproc: polling status readout over procfs."""

"""
The VIEW layer turns a PackScene into PyVista actors and exports images.
It reads the model; the model never imports it.
"""

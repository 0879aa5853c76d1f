"""spnlab: SPN layout modelling, wiring derivation and trace highlighting.

Research / education only.
"""

__version__ = "0.1.0"

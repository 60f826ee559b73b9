"""
Mistakebook: knowledge-point tagging and spaced review for exam mistakes.
"""
__version__ = "0.4.0"

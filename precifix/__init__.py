"""
Precifix Server - precificacao e gestao para estetica automotiva
"""
__version__ = "1.0.0"

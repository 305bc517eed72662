"""Gleba : API de gestion d'exploitation (potager, verger, elevage, comptabilite)"""

__version__ = "1.0.0"
